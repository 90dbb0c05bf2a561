"""Hex-coordinate world core: grid, pathfinding, generators and rule engine."""

__version__ = "0.1.0"
