"""Chunk export schemas consumed by renderers."""

from typing import Optional

from pydantic import BaseModel, Field

from .base import BiomeType, StructureCategory, TerrainType


class CellRecord(BaseModel):
    """A single placed cell."""

    q: int
    r: int
    z: int
    terrain: TerrainType
    elevation: int
    movement_cost: Optional[int] = None  # None = impassable


class StructureRecord(BaseModel):
    """A structure placed on one hex."""

    q: int
    r: int
    z: int
    category: StructureCategory
    kind: str


class ChunkRecord(BaseModel):
    """Everything a renderer needs to draw one chunk."""

    x: int
    y: int
    biome: BiomeType
    width: int = 0
    height: int = 0
    cells: list[CellRecord] = Field(default_factory=list)
    structures: list[StructureRecord] = Field(default_factory=list)
