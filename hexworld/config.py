"""Configuration for the hexworld core."""

import os
from pathlib import Path

# Paths
HEXWORLD_ROOT = Path(__file__).parent
TEMPLATES_DIR = HEXWORLD_ROOT / "templates"

# World map
DEFAULT_CHUNK_SIZE = int(os.environ.get("HEXWORLD_CHUNK_SIZE", "20"))

# Elevation window used when no terrain-specific rule applies
MIN_ELEVATION = -10
MAX_ELEVATION = 15

# Terrain-specific elevation limits checked by HexGrid.is_in_bounds
WATER_MAX_ELEVATION = 0
SNOW_MIN_ELEVATION = 5
LAVA_MAX_ELEVATION = 2

# Steep neighbours (elevation delta above this) add 2 * delta to a cell's cost
STEEP_ELEVATION_DELTA = 1

# Area generator: chance that a cell gets a structure roll at all
STRUCTURE_CHANCE = 0.3

# Logging
LOG_LEVEL = os.environ.get("HEXWORLD_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
