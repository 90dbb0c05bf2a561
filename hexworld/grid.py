"""Hex grid storage, movement costs and A* pathfinding."""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional

from hexworld import config
from hexworld.hex_coords import HexPosition, get_all_neighbors
from hexworld.schemas.base import (
    IMPASSABLE_TERRAIN,
    TERRAIN_BASE_COST,
    TerrainType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """One placed hex.

    Elevation is authoritative; ``position.z`` is derived from it.
    """
    q: int
    r: int
    terrain: TerrainType
    elevation: int
    movement_cost: Optional[int]  # None = impassable

    @property
    def position(self) -> HexPosition:
        return HexPosition(self.q, self.r, self.elevation)

    @property
    def passable(self) -> bool:
        return self.movement_cost is not None


def elevation_allowed(terrain: TerrainType, elevation: int) -> bool:
    """Terrain-specific elevation limits for an existing cell."""
    if terrain == TerrainType.WATER:
        return elevation <= config.WATER_MAX_ELEVATION
    if terrain == TerrainType.SNOW:
        return elevation >= config.SNOW_MIN_ELEVATION
    if terrain == TerrainType.LAVA:
        return elevation <= config.LAVA_MAX_ELEVATION
    return config.MIN_ELEVATION <= elevation <= config.MAX_ELEVATION


class HexGrid:
    """Cells keyed by planar (q, r) with a bounding rectangle that only grows.

    Each column holds at most one cell; adding a cell to an occupied column
    replaces it.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self._cells: dict[tuple[int, int], Cell] = {}
        self._size = (width, height)

    @classmethod
    def with_size(cls, width: int, height: int) -> "HexGrid":
        return cls(width, height)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, position: HexPosition) -> bool:
        return (position.q, position.r) in self._cells

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    def get_size(self) -> tuple[int, int]:
        return self._size

    def get_cell(self, position: HexPosition) -> Optional[Cell]:
        return self._cells.get((position.q, position.r))

    def iter_cells(self) -> Iterator[tuple[HexPosition, Cell]]:
        """Yield (position, cell) pairs in insertion order."""
        for cell in self._cells.values():
            yield cell.position, cell

    def add_cell(
        self, position: HexPosition, terrain: TerrainType, elevation: int
    ) -> Cell:
        """Insert or replace the cell in ``position``'s column.

        Movement cost is the terrain's base cost, raised by 2 * delta when
        the first already-placed neighbor (in get_neighbors order) differs in
        elevation by more than one. Only that single neighbor is sampled, so
        the result depends on insertion order.
        """
        terrain = TerrainType(terrain)
        position = position.with_z(elevation)

        movement_cost = TERRAIN_BASE_COST[terrain]
        if movement_cost is not None:
            neighbor = self._first_neighbor_cell(position)
            if neighbor is not None:
                elevation_diff = abs(elevation - neighbor.elevation)
                if elevation_diff > config.STEEP_ELEVATION_DELTA:
                    movement_cost += elevation_diff * 2

        cell = Cell(
            q=position.q,
            r=position.r,
            terrain=terrain,
            elevation=elevation,
            movement_cost=movement_cost,
        )
        self._cells[(position.q, position.r)] = cell

        width, height = self._size
        self._size = (max(width, position.q + 1), max(height, position.r + 1))
        return cell

    def _first_neighbor_cell(self, position: HexPosition) -> Optional[Cell]:
        for neighbor in self.get_neighbors(position):
            if (neighbor.q, neighbor.r) == (position.q, position.r):
                continue
            cell = self._cells.get((neighbor.q, neighbor.r))
            if cell is not None:
                return cell
        return None

    def get_neighbors(self, position: HexPosition) -> list[HexPosition]:
        """Six planar neighbors on the same layer, then up and down.

        Only positions passing :meth:`is_in_bounds` are returned.
        """
        candidates = [
            HexPosition(q, r, position.z)
            for q, r, _ in get_all_neighbors(position.q, position.r)
        ]
        candidates.append(position.offset(0, 0, 1))
        candidates.append(position.offset(0, 0, -1))
        return [pos for pos in candidates if self.is_in_bounds(pos)]

    def is_in_bounds(self, position: HexPosition) -> bool:
        """Check the bounding rectangle, then elevation limits.

        The queried layer must lie in the default elevation window. A column
        with a cell is additionally checked against that cell's terrain rules.
        """
        width, height = self._size
        if not (0 <= position.q < width and 0 <= position.r < height):
            return False
        if not config.MIN_ELEVATION <= position.z <= config.MAX_ELEVATION:
            return False

        cell = self._cells.get((position.q, position.r))
        if cell is None:
            return True
        return elevation_allowed(cell.terrain, cell.elevation)

    def distance(self, start: HexPosition, end: HexPosition) -> int:
        return start.distance(end)

    def elevation_cost(
        self, start: HexPosition, end: HexPosition
    ) -> Optional[int]:
        """Cost of the climb between two placed cells; None if impassable."""
        from_cell = self.get_cell(start)
        to_cell = self.get_cell(end)
        if from_cell is None or to_cell is None:
            return None

        elevation_diff = abs(to_cell.elevation - from_cell.elevation)
        if elevation_diff <= 1:
            base_cost = elevation_diff
        else:
            base_cost = elevation_diff * 2

        pair = {from_cell.terrain, to_cell.terrain}
        if pair & IMPASSABLE_TERRAIN:
            return None
        if TerrainType.WATER in pair:
            return base_cost * 2
        if TerrainType.SNOW in pair:
            return base_cost * 2
        if TerrainType.ROUGH in pair:
            return int(base_cost * 1.5)
        return base_cost

    def edge_weight(self, start: HexPosition, end: HexPosition) -> Optional[int]:
        """Cost of stepping from ``start`` into ``end``; None if impassable."""
        to_cell = self.get_cell(end)
        if to_cell is None or not to_cell.passable:
            return None
        climb = self.elevation_cost(start, end)
        if climb is None:
            return None
        return to_cell.movement_cost + climb

    def path_cost(self, path: list[HexPosition]) -> Optional[int]:
        """Sum of edge weights along ``path``; None if any step is impassable."""
        total = 0
        for start, end in zip(path, path[1:]):
            weight = self.edge_weight(start, end)
            if weight is None:
                return None
            total += weight
        return total

    def find_path(
        self,
        start: HexPosition,
        goal: HexPosition,
        max_nodes: Optional[int] = None,
    ) -> Optional[list[HexPosition]]:
        """Weighted A* from ``start`` to ``goal``, both inclusive.

        Returns None when an endpoint is out of bounds or empty, when the
        goal is unreachable, or when more than ``max_nodes`` positions were
        expanded. The heuristic is :meth:`distance`, which can underestimate
        climbs but is not guaranteed admissible once terrain multipliers
        apply, so returned paths are not guaranteed optimal.
        """
        if not self.is_in_bounds(start) or not self.is_in_bounds(goal):
            return None

        start_cell = self.get_cell(start)
        goal_cell = self.get_cell(goal)
        if start_cell is None or goal_cell is None:
            return None
        start = start_cell.position
        goal = goal_cell.position

        counter = itertools.count()
        open_heap: list[tuple[float, int, HexPosition]] = [(0, next(counter), start)]
        came_from: dict[HexPosition, HexPosition] = {}
        g_score: dict[HexPosition, int] = {start: 0}
        closed: set[HexPosition] = set()

        while open_heap:
            _, _, current = heapq.heappop(open_heap)
            if current == goal:
                return self._reconstruct_path(came_from, current)
            if current in closed:
                continue
            closed.add(current)

            if max_nodes is not None and len(closed) > max_nodes:
                logger.debug("Path search %s -> %s exceeded %d nodes", start, goal, max_nodes)
                return None

            for candidate in self.get_neighbors(current):
                neighbor_cell = self.get_cell(candidate)
                if neighbor_cell is None:
                    continue
                neighbor = neighbor_cell.position
                if neighbor == current or neighbor in closed:
                    continue

                weight = self.edge_weight(current, neighbor)
                if weight is None:
                    continue

                tentative = g_score[current] + weight
                if tentative < g_score.get(neighbor, math.inf):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative
                    f_score = tentative + self.distance(neighbor, goal)
                    heapq.heappush(open_heap, (f_score, next(counter), neighbor))

        logger.debug("No path from %s to %s", start, goal)
        return None

    def _reconstruct_path(
        self, came_from: dict[HexPosition, HexPosition], current: HexPosition
    ) -> list[HexPosition]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path
