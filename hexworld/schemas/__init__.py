"""Pydantic schemas for hexworld."""

from .base import (
    TerrainType,
    TERRAIN_BASE_COST,
    IMPASSABLE_TERRAIN,
    BiomeType,
    StructureCategory,
    BuildingType,
    VegetationType,
    LandmarkType,
    StructureType,
    structure_category,
)
from .template import (
    HexCoord,
    HexOffset,
    ElevationRequirement,
    StructureTemplate,
    StructureVariant,
    GenerationRules,
    ConnectionPoint,
    InteriorLayout,
    Condition,
    Action,
    Rule,
    Template,
)
from .world import CellRecord, StructureRecord, ChunkRecord

__all__ = [
    # base
    "TerrainType",
    "TERRAIN_BASE_COST",
    "IMPASSABLE_TERRAIN",
    "BiomeType",
    "StructureCategory",
    "BuildingType",
    "VegetationType",
    "LandmarkType",
    "StructureType",
    "structure_category",
    # rule documents
    "HexCoord",
    "HexOffset",
    "ElevationRequirement",
    "StructureTemplate",
    "StructureVariant",
    "GenerationRules",
    "ConnectionPoint",
    "InteriorLayout",
    "Condition",
    "Action",
    "Rule",
    "Template",
    # world export
    "CellRecord",
    "StructureRecord",
    "ChunkRecord",
]
