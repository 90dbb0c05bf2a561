"""Non-chunked map generation from named weighted-distribution templates.

These map templates are weight tables, unrelated to the rule documents
handled by :mod:`hexworld.template_engine`.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, TypeVar

from hexworld import config
from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas.base import (
    BiomeType,
    BuildingType,
    StructureType,
    TerrainType,
    VegetationType,
)
from hexworld.world_map import ChunkPosition, MapChunk, draw_seed

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MapTemplate:
    """Size plus terrain and structure weights; weights are read in insertion order."""

    name: str
    size: tuple[int, int]
    terrain_distribution: dict[TerrainType, float] = field(default_factory=dict)
    structure_distribution: dict[StructureType, float] = field(default_factory=dict)


def default_templates() -> dict[str, MapTemplate]:
    return {
        "town": MapTemplate(
            name="Town",
            size=(20, 20),
            terrain_distribution={
                TerrainType.PLAIN: 0.8,
                TerrainType.ROUGH: 0.2,
            },
            structure_distribution={
                BuildingType.HOUSE: 0.3,
                BuildingType.SHOP: 0.1,
                BuildingType.INN: 0.05,
            },
        ),
        "forest": MapTemplate(
            name="Forest",
            size=(30, 30),
            terrain_distribution={
                TerrainType.PLAIN: 0.6,
                TerrainType.ROUGH: 0.4,
            },
            structure_distribution={
                VegetationType.TREE: 0.5,
                VegetationType.BUSH: 0.2,
            },
        ),
    }


class MapGenerator:
    """Fills fresh grids from named map templates using its own seeded generator."""

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        if rng is None:
            self.seed = draw_seed() if seed is None else seed
            rng = random.Random(self.seed)
        else:
            self.seed = seed
        self._rng = rng
        self.templates: dict[str, MapTemplate] = default_templates()

    @classmethod
    def with_seed(cls, seed: int) -> "MapGenerator":
        return cls(seed=seed)

    def register_template(self, key: str, template: MapTemplate) -> None:
        self.templates[key] = template

    def template_names(self) -> list[str]:
        return list(self.templates)

    def generate_map(self, template_name: str) -> Optional[MapChunk]:
        """Generate a map from a named template, or None if the name is unknown."""
        template = self.templates.get(template_name)
        if template is None:
            logger.debug("Unknown map template: %s", template_name)
            return None

        chunk = MapChunk(
            position=ChunkPosition(0, 0),
            grid=HexGrid(),
            biome=BiomeType.PLAINS,
        )
        width, height = template.size
        for q in range(width):
            for r in range(height):
                terrain = self._select_weighted(template.terrain_distribution)
                if terrain is None:
                    terrain = TerrainType.PLAIN
                elevation = self._rng.randrange(0, 5)
                cell = chunk.grid.add_cell(HexPosition.new_2d(q, r), terrain, elevation)

                structure = self._select_structure(template.structure_distribution)
                if structure is not None:
                    chunk.structures[cell.position] = structure

        logger.debug(
            "Generated %s map: %dx%d, %d structures",
            template.name, width, height, len(chunk.structures),
        )
        return chunk

    def _select_structure(
        self, distribution: dict[StructureType, float]
    ) -> Optional[StructureType]:
        if self._rng.random() > config.STRUCTURE_CHANCE:
            return None
        return self._select_weighted(distribution)

    def _select_weighted(self, distribution: dict[T, float]) -> Optional[T]:
        """Cumulative-weight draw; None if rounding exhausts the weights."""
        total = sum(distribution.values())
        value = self._rng.random() * total
        for item, weight in distribution.items():
            value -= weight
            if value <= 0:
                return item
        return None
