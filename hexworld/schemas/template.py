"""Rule document schemas.

A rule document describes one :class:`Template`: an ordered list of rules,
each a list of conditions and a list of actions. Conditions are tagged by a
``type`` field with their parameters alongside it. Actions are tagged by
``type`` with their parameters nested under ``params``::

    name: "Riverside Town"
    description: "A medium-sized town located near a river"
    rules:
      - name: "Raise plains"
        priority: 10
        conditions:
          - type: TerrainType
            terrain: Plain
        actions:
          - type: SetElevation
            params:
              elevation: 5

Variant names and field names are part of the document format and must not
change.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hexworld.hex_coords import HexPosition
from .base import TerrainType


class DocumentModel(BaseModel):
    """Base for parsed document parts; parsed templates are read-only."""

    model_config = ConfigDict(frozen=True)


class HexCoord(DocumentModel):
    """Absolute hex position inside a document."""

    q: int
    r: int
    z: int = 0

    def to_position(self) -> HexPosition:
        return HexPosition(self.q, self.r, self.z)


class HexOffset(DocumentModel):
    """Footprint offset relative to a structure's base position."""

    q: int
    r: int
    terrain: TerrainType = TerrainType.PLAIN


class ElevationRequirement(DocumentModel):
    min: int
    max: int
    relative_to_base: bool = False


# --- Structure template parts -------------------------------------------------


class FlatRoof(DocumentModel):
    type: Literal["Flat"]


class PeakedRoof(DocumentModel):
    type: Literal["Peaked"]
    slope: float


class DomedRoof(DocumentModel):
    type: Literal["Domed"]
    radius: int


class TieredRoof(DocumentModel):
    type: Literal["Tiered"]
    levels: int


RoofStyle = Annotated[
    Union[FlatRoof, PeakedRoof, DomedRoof, TieredRoof],
    Field(discriminator="type"),
]


class AddFloor(DocumentModel):
    type: Literal["AddFloor"]
    level: int
    terrain: TerrainType


class AddWall(DocumentModel):
    type: Literal["AddWall"]
    position: HexOffset
    height: int


class AddRoof(DocumentModel):
    type: Literal["AddRoof"]
    style: RoofStyle
    height: int


class AddDecoration(DocumentModel):
    type: Literal["AddDecoration"]
    decoration_type: str
    position: HexOffset


class ModifyTerrainModification(DocumentModel):
    type: Literal["ModifyTerrain"]
    position: HexOffset
    terrain: TerrainType


StructureModification = Annotated[
    Union[AddFloor, AddWall, AddRoof, AddDecoration, ModifyTerrainModification],
    Field(discriminator="type"),
]


class StructureVariant(DocumentModel):
    name: str
    probability: float
    modifications: list[StructureModification] = Field(default_factory=list)


class GridAlignment(DocumentModel):
    type: Literal["Grid"]
    spacing: int


class RadialAlignment(DocumentModel):
    type: Literal["Radial"]
    center: HexOffset
    rings: int


class OrganicAlignment(DocumentModel):
    type: Literal["Organic"]
    min_spacing: int


class LinearAlignment(DocumentModel):
    type: Literal["Linear"]
    direction: int
    spacing: int


AlignmentRule = Annotated[
    Union[GridAlignment, RadialAlignment, OrganicAlignment, LinearAlignment],
    Field(discriminator="type"),
]


class OutwardGrowth(DocumentModel):
    type: Literal["Outward"]


class InwardGrowth(DocumentModel):
    type: Literal["Inward"]


class LinearGrowth(DocumentModel):
    type: Literal["Linear"]
    direction: int


class ClusteredGrowth(DocumentModel):
    type: Literal["Clustered"]
    cluster_size: int


GrowthPattern = Annotated[
    Union[OutwardGrowth, InwardGrowth, LinearGrowth, ClusteredGrowth],
    Field(discriminator="type"),
]


class GenerationRules(DocumentModel):
    min_spacing: int
    max_count: int
    alignment: AlignmentRule
    growth_pattern: GrowthPattern


class ConnectionType(DocumentModel):
    type: Literal["Road", "Wall", "Bridge", "Door", "Path"]


class ConnectionPoint(DocumentModel):
    position: HexOffset
    connection_type: ConnectionType
    required: bool = False


class Room(DocumentModel):
    size: tuple[int, int]
    purpose: str
    required_connections: list[str] = Field(default_factory=list)


class Corridor(DocumentModel):
    start: HexOffset
    end: HexOffset
    width: int


class InteriorLayout(DocumentModel):
    rooms: list[Room] = Field(default_factory=list)
    corridors: list[Corridor] = Field(default_factory=list)
    entrances: list[HexOffset] = Field(default_factory=list)


class StructureTemplate(DocumentModel):
    """Placeable structure: a footprint of offsets plus placement requirements."""

    name: str
    structure_type: str
    footprint: list[HexOffset]
    required_terrain: Optional[TerrainType] = None
    elevation_requirements: Optional[ElevationRequirement] = None
    tags: list[str] = Field(default_factory=list)
    parent_template: Optional[str] = None
    variants: list[StructureVariant] = Field(default_factory=list)
    generation_rules: Optional[GenerationRules] = None
    connections: list[ConnectionPoint] = Field(default_factory=list)
    interior_layout: Optional[InteriorLayout] = None


# --- Conditions ---------------------------------------------------------------


class TerrainTypeCondition(DocumentModel):
    type: Literal["TerrainType"]
    terrain: TerrainType


class ElevationRangeCondition(DocumentModel):
    type: Literal["ElevationRange"]
    min: int
    max: int


class AdjacentToCondition(DocumentModel):
    type: Literal["AdjacentTo"]
    structure_type: str


class MinDistanceFromCondition(DocumentModel):
    type: Literal["MinDistanceFrom"]
    structure_type: str
    distance: int


class MaxDistanceFromCondition(DocumentModel):
    type: Literal["MaxDistanceFrom"]
    structure_type: str
    distance: int


class BiomeTypeCondition(DocumentModel):
    type: Literal["BiomeType"]
    biome: str


class NearWaterCondition(DocumentModel):
    type: Literal["NearWater"]
    distance: int


class HasTagCondition(DocumentModel):
    type: Literal["HasTag"]
    tag: str


class PopulationDensityCondition(DocumentModel):
    type: Literal["PopulationDensity"]
    min: float
    max: float


class ResourceAvailableCondition(DocumentModel):
    type: Literal["ResourceAvailable"]
    resource: str
    amount: int


class RoadAccessCondition(DocumentModel):
    type: Literal["RoadAccess"]
    distance: int


class SlopeRangeCondition(DocumentModel):
    type: Literal["SlopeRange"]
    min_degrees: float
    max_degrees: float


class ViewDistanceCondition(DocumentModel):
    type: Literal["ViewDistance"]
    min: int


class WindExposureCondition(DocumentModel):
    type: Literal["WindExposure"]
    min: float
    max: float


class SunExposureCondition(DocumentModel):
    type: Literal["SunExposure"]
    min: float
    max: float


class TemplateExistsCondition(DocumentModel):
    type: Literal["TemplateExists"]
    template_name: str


class AndCondition(DocumentModel):
    type: Literal["And"]
    conditions: list["Condition"]


class OrCondition(DocumentModel):
    type: Literal["Or"]
    conditions: list["Condition"]


class NotCondition(DocumentModel):
    type: Literal["Not"]
    condition: "Condition"


Condition = Annotated[
    Union[
        TerrainTypeCondition,
        ElevationRangeCondition,
        AdjacentToCondition,
        MinDistanceFromCondition,
        MaxDistanceFromCondition,
        BiomeTypeCondition,
        NearWaterCondition,
        HasTagCondition,
        PopulationDensityCondition,
        ResourceAvailableCondition,
        RoadAccessCondition,
        SlopeRangeCondition,
        ViewDistanceCondition,
        WindExposureCondition,
        SunExposureCondition,
        TemplateExistsCondition,
        AndCondition,
        OrCondition,
        NotCondition,
    ],
    Field(discriminator="type"),
]

AndCondition.model_rebuild()
OrCondition.model_rebuild()
NotCondition.model_rebuild()


# --- Action parameters --------------------------------------------------------


class StraightRoad(DocumentModel):
    type: Literal["Straight"]


class WindingRoad(DocumentModel):
    type: Literal["Winding"]
    variation: float


class OrganicRoad(DocumentModel):
    type: Literal["Organic"]
    roughness: float


RoadStyle = Annotated[
    Union[StraightRoad, WindingRoad, OrganicRoad],
    Field(discriminator="type"),
]


class SmoothOperation(DocumentModel):
    type: Literal["Smooth"]


class RoughenOperation(DocumentModel):
    type: Literal["Roughen"]
    intensity: float


class RaiseOperation(DocumentModel):
    type: Literal["Raise"]
    amount: int


class LowerOperation(DocumentModel):
    type: Literal["Lower"]
    amount: int


class FlattenOperation(DocumentModel):
    type: Literal["Flatten"]
    target: int


TerrainOperation = Annotated[
    Union[
        SmoothOperation,
        RoughenOperation,
        RaiseOperation,
        LowerOperation,
        FlattenOperation,
    ],
    Field(discriminator="type"),
]


class LakeFeature(DocumentModel):
    type: Literal["Lake"]


class RiverFeature(DocumentModel):
    type: Literal["River"]
    width: int


class OceanFeature(DocumentModel):
    type: Literal["Ocean"]


class PondFeature(DocumentModel):
    type: Literal["Pond"]


class CanalFeature(DocumentModel):
    type: Literal["Canal"]
    width: int


WaterFeatureType = Annotated[
    Union[LakeFeature, RiverFeature, OceanFeature, PondFeature, CanalFeature],
    Field(discriminator="type"),
]


class NoiseType(DocumentModel):
    type: Literal["Perlin", "Simplex", "Worley", "Ridged"]


class PlaceStructureParams(DocumentModel):
    structure: StructureTemplate


class SetTerrainParams(DocumentModel):
    terrain: TerrainType


class SetElevationParams(DocumentModel):
    elevation: int


class AddTagParams(DocumentModel):
    tag: str


class GenerateWallParams(DocumentModel):
    height: int
    material: TerrainType


class ApplyTemplateParams(DocumentModel):
    template_name: str


class GenerateRoadParams(DocumentModel):
    width: int
    material: TerrainType
    to: HexCoord
    style: RoadStyle


class PlaceStructureClusterParams(DocumentModel):
    structure: StructureTemplate
    count: int
    spacing: int
    variation: bool


class ModifyTerrainParams(DocumentModel):
    radius: int
    operation: TerrainOperation


class SpawnResourceParams(DocumentModel):
    resource_type: str
    amount: int
    spread: int


class SetBiomeParams(DocumentModel):
    biome: str


class CreateWaterFeatureParams(DocumentModel):
    feature_type: WaterFeatureType
    size: int


class ApplyNoiseParams(DocumentModel):
    noise_type: NoiseType
    amplitude: float
    frequency: float


# --- Actions ------------------------------------------------------------------


class PlaceStructureAction(DocumentModel):
    type: Literal["PlaceStructure"]
    params: PlaceStructureParams


class SetTerrainAction(DocumentModel):
    type: Literal["SetTerrain"]
    params: SetTerrainParams


class SetElevationAction(DocumentModel):
    type: Literal["SetElevation"]
    params: SetElevationParams


class AddTagAction(DocumentModel):
    type: Literal["AddTag"]
    params: AddTagParams


class GenerateWallAction(DocumentModel):
    type: Literal["GenerateWall"]
    params: GenerateWallParams


class ApplyTemplateAction(DocumentModel):
    type: Literal["ApplyTemplate"]
    params: ApplyTemplateParams


class GenerateRoadAction(DocumentModel):
    type: Literal["GenerateRoad"]
    params: GenerateRoadParams


class PlaceStructureClusterAction(DocumentModel):
    type: Literal["PlaceStructureCluster"]
    params: PlaceStructureClusterParams


class ModifyTerrainAction(DocumentModel):
    type: Literal["ModifyTerrain"]
    params: ModifyTerrainParams


class SpawnResourceAction(DocumentModel):
    type: Literal["SpawnResource"]
    params: SpawnResourceParams


class SetBiomeAction(DocumentModel):
    type: Literal["SetBiome"]
    params: SetBiomeParams


class CreateWaterFeatureAction(DocumentModel):
    type: Literal["CreateWaterFeature"]
    params: CreateWaterFeatureParams


class ApplyNoiseAction(DocumentModel):
    type: Literal["ApplyNoise"]
    params: ApplyNoiseParams


Action = Annotated[
    Union[
        PlaceStructureAction,
        SetTerrainAction,
        SetElevationAction,
        AddTagAction,
        GenerateWallAction,
        ApplyTemplateAction,
        GenerateRoadAction,
        PlaceStructureClusterAction,
        ModifyTerrainAction,
        SpawnResourceAction,
        SetBiomeAction,
        CreateWaterFeatureAction,
        ApplyNoiseAction,
    ],
    Field(discriminator="type"),
]


def nest_action_params(value: Any) -> Any:
    """Move flattened action fields under ``params``.

    Older documents write action parameters next to ``type``; both spellings
    parse to the same action.
    """
    if isinstance(value, dict) and "type" in value and "params" not in value:
        params = {key: item for key, item in value.items() if key != "type"}
        return {"type": value["type"], "params": params}
    return value


# --- Templates ----------------------------------------------------------------


class Rule(DocumentModel):
    name: str
    conditions: list[Condition]
    actions: list[Action]
    priority: int

    @field_validator("actions", mode="before")
    @classmethod
    def normalize_actions(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [nest_action_params(item) for item in v]
        return v


class Template(DocumentModel):
    """A named, ordered set of rules loaded from one document."""

    name: str
    description: str
    rules: list[Rule]
    tags: list[str] = Field(default_factory=list)
