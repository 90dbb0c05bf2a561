"""Base types and enums for hexworld schemas.

Enum values are the exact strings used by rule documents and chunk exports.
"""

from enum import Enum
from typing import Optional, Union


class TerrainType(str, Enum):
    PLAIN = "Plain"
    ROUGH = "Rough"
    WATER = "Water"
    WALL = "Wall"
    SAND = "Sand"
    SNOW = "Snow"
    SWAMP = "Swamp"
    LAVA = "Lava"


# Base cost of entering a cell; None marks impassable terrain
TERRAIN_BASE_COST: dict[TerrainType, Optional[int]] = {
    TerrainType.PLAIN: 1,
    TerrainType.ROUGH: 2,
    TerrainType.WATER: 3,
    TerrainType.WALL: None,
    TerrainType.SAND: 2,
    TerrainType.SNOW: 2,
    TerrainType.SWAMP: 3,
    TerrainType.LAVA: None,
}

IMPASSABLE_TERRAIN = frozenset({TerrainType.WALL, TerrainType.LAVA})


class BiomeType(str, Enum):
    FOREST = "Forest"
    MOUNTAIN = "Mountain"
    PLAINS = "Plains"
    DESERT = "Desert"
    OCEAN = "Ocean"
    TUNDRA = "Tundra"


class StructureCategory(str, Enum):
    BUILDING = "Building"
    VEGETATION = "Vegetation"
    LANDMARK = "Landmark"


class BuildingType(str, Enum):
    HOUSE = "House"
    SHOP = "Shop"
    TEMPLE = "Temple"
    CASTLE = "Castle"
    TOWER = "Tower"
    INN = "Inn"
    STABLE = "Stable"
    WALL = "Wall"
    GATE = "Gate"


class VegetationType(str, Enum):
    TREE = "Tree"
    BUSH = "Bush"
    FLOWER = "Flower"
    GRASS = "Grass"
    DEAD_TREE = "DeadTree"


class LandmarkType(str, Enum):
    MOUNTAIN = "Mountain"
    HILL = "Hill"
    ROCK = "Rock"
    STATUE = "Statue"
    WELL = "Well"
    BRIDGE = "Bridge"


# A placed structure is one member of the three families above
StructureType = Union[BuildingType, VegetationType, LandmarkType]

_CATEGORY_BY_FAMILY = {
    BuildingType: StructureCategory.BUILDING,
    VegetationType: StructureCategory.VEGETATION,
    LandmarkType: StructureCategory.LANDMARK,
}


def structure_category(kind: StructureType) -> StructureCategory:
    """Family a structure kind belongs to."""
    return _CATEGORY_BY_FAMILY[type(kind)]
