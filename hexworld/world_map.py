"""Chunked world map with lazy, seeded procedural generation."""

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from hexworld import config
from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas.base import (
    BiomeType,
    BuildingType,
    LandmarkType,
    StructureType,
    TerrainType,
    VegetationType,
    structure_category,
)
from hexworld.schemas.world import CellRecord, ChunkRecord, StructureRecord

logger = logging.getLogger(__name__)


# Biomes in the order a uniform draw indexes them
BIOMES: list[BiomeType] = [
    BiomeType.FOREST,
    BiomeType.MOUNTAIN,
    BiomeType.PLAINS,
    BiomeType.DESERT,
    BiomeType.OCEAN,
    BiomeType.TUNDRA,
]

# biome -> (terrain, probability, fallback terrain)
BIOME_TERRAIN: dict[BiomeType, tuple[TerrainType, float, TerrainType]] = {
    BiomeType.FOREST: (TerrainType.PLAIN, 0.7, TerrainType.ROUGH),
    BiomeType.MOUNTAIN: (TerrainType.ROUGH, 0.8, TerrainType.WALL),
    BiomeType.PLAINS: (TerrainType.PLAIN, 1.0, TerrainType.PLAIN),
    BiomeType.DESERT: (TerrainType.PLAIN, 0.9, TerrainType.ROUGH),
    BiomeType.OCEAN: (TerrainType.WATER, 1.0, TerrainType.WATER),
    BiomeType.TUNDRA: (TerrainType.PLAIN, 0.6, TerrainType.ROUGH),
}

# biome -> inclusive elevation range
BIOME_ELEVATION: dict[BiomeType, tuple[int, int]] = {
    BiomeType.MOUNTAIN: (5, 14),
    BiomeType.PLAINS: (0, 2),
    BiomeType.FOREST: (1, 4),
    BiomeType.DESERT: (0, 1),
    BiomeType.OCEAN: (-1, -1),
    BiomeType.TUNDRA: (2, 6),
}

# (biome, terrain) -> structures rolled in order, first hit wins
BIOME_STRUCTURES: dict[tuple[BiomeType, TerrainType], list[tuple[StructureType, float]]] = {
    (BiomeType.FOREST, TerrainType.PLAIN): [
        (VegetationType.TREE, 0.4),
        (VegetationType.BUSH, 0.2),
    ],
    (BiomeType.MOUNTAIN, TerrainType.ROUGH): [
        (LandmarkType.ROCK, 0.3),
    ],
    (BiomeType.PLAINS, TerrainType.PLAIN): [
        (BuildingType.HOUSE, 0.1),
        (LandmarkType.WELL, 0.05),
    ],
}


class ChunkPosition(NamedTuple):
    """Chunk grid coordinate."""
    x: int
    y: int


@dataclass
class MapChunk:
    """A generated block of cells plus the structures placed on them.

    Structures are keyed by the position of the cell they sit on.
    """
    position: ChunkPosition
    grid: HexGrid
    biome: BiomeType
    structures: dict[HexPosition, StructureType] = field(default_factory=dict)

    def structure_at(self, position: HexPosition) -> Optional[StructureType]:
        cell = self.grid.get_cell(position)
        if cell is None:
            return None
        return self.structures.get(cell.position)

    def to_record(self) -> ChunkRecord:
        """Export cells and structures for renderers."""
        cells = sorted(
            (cell for _, cell in self.grid.iter_cells()),
            key=lambda c: (c.q, c.r),
        )
        width, height = self.grid.get_size()
        return ChunkRecord(
            x=self.position.x,
            y=self.position.y,
            biome=self.biome,
            width=width,
            height=height,
            cells=[
                CellRecord(
                    q=cell.q,
                    r=cell.r,
                    z=cell.elevation,
                    terrain=cell.terrain,
                    elevation=cell.elevation,
                    movement_cost=cell.movement_cost,
                )
                for cell in cells
            ],
            structures=[
                StructureRecord(
                    q=pos.q,
                    r=pos.r,
                    z=pos.z,
                    category=structure_category(kind),
                    kind=kind.value,
                )
                for pos, kind in sorted(self.structures.items())
            ],
        )


def draw_seed() -> int:
    """Fresh 64-bit seed from process randomness."""
    return random.SystemRandom().getrandbits(64)


class WorldMap:
    """Lazily generated, cached chunks of a seeded world.

    The random generator belongs to this instance; identical seeds and an
    identical sequence of chunk requests reproduce identical chunks.
    """

    def __init__(
        self,
        chunk_size: int = config.DEFAULT_CHUNK_SIZE,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        if rng is None:
            self.seed = draw_seed() if seed is None else seed
            rng = random.Random(self.seed)
        else:
            self.seed = seed
        self._rng = rng
        self._chunks: dict[ChunkPosition, MapChunk] = {}

    @classmethod
    def with_seed(cls, chunk_size: int, seed: int) -> "WorldMap":
        return cls(chunk_size=chunk_size, seed=seed)

    @property
    def chunks(self) -> Mapping[ChunkPosition, MapChunk]:
        return MappingProxyType(self._chunks)

    def rng_state(self) -> tuple:
        return self._rng.getstate()

    def get_or_generate_chunk(self, position: ChunkPosition) -> MapChunk:
        position = ChunkPosition(*position)
        chunk = self._chunks.get(position)
        if chunk is None:
            chunk = self._generate_chunk(position)
            self._chunks[position] = chunk
        return chunk

    def get_chunk(self, position: ChunkPosition) -> Optional[MapChunk]:
        return self._chunks.get(ChunkPosition(*position))

    def get_chunk_position_for_hex(self, hex_position: HexPosition) -> ChunkPosition:
        return ChunkPosition(
            hex_position.q // self.chunk_size,
            hex_position.r // self.chunk_size,
        )

    def _generate_chunk(self, position: ChunkPosition) -> MapChunk:
        biome = self._determine_biome(position)
        chunk = MapChunk(position=position, grid=HexGrid(), biome=biome)

        for q in range(self.chunk_size):
            for r in range(self.chunk_size):
                hex_position = HexPosition.new_2d(
                    position.x * self.chunk_size + q,
                    position.y * self.chunk_size + r,
                )
                terrain = self._terrain_for_biome(biome)
                elevation = self._elevation_for_biome(biome)
                cell = chunk.grid.add_cell(hex_position, terrain, elevation)

                structure = self._structure_for(biome, terrain)
                if structure is not None:
                    chunk.structures[cell.position] = structure

        logger.debug(
            "Generated chunk %s: biome=%s cells=%d structures=%d",
            position, biome.value, len(chunk.grid), len(chunk.structures),
        )
        return chunk

    def _determine_biome(self, position: ChunkPosition) -> BiomeType:
        # Uniform per chunk; neighbouring chunks are not correlated
        return BIOMES[self._rng.randrange(len(BIOMES))]

    def _terrain_for_biome(self, biome: BiomeType) -> TerrainType:
        primary, chance, fallback = BIOME_TERRAIN[biome]
        if primary == fallback:
            return primary
        return primary if self._rng.random() < chance else fallback

    def _elevation_for_biome(self, biome: BiomeType) -> int:
        low, high = BIOME_ELEVATION[biome]
        if low == high:
            return low
        return self._rng.randint(low, high)

    def _structure_for(
        self, biome: BiomeType, terrain: TerrainType
    ) -> Optional[StructureType]:
        for kind, chance in BIOME_STRUCTURES.get((biome, terrain), []):
            if self._rng.random() < chance:
                return kind
        return None
