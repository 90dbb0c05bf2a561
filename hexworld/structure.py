"""Footprint-based structure placement onto a grid."""

from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas.template import StructureTemplate


class Structure:
    """A structure template anchored at a base position.

    Occupied positions are computed once from the template footprint; each
    inherits the base position's elevation layer.
    """

    def __init__(self, template: StructureTemplate, base_position: HexPosition):
        self.template = template
        self.base_position = base_position
        self.occupied_positions: frozenset[HexPosition] = frozenset(
            self._offset_position(offset.q, offset.r)
            for offset in template.footprint
        )

    def _offset_position(self, dq: int, dr: int) -> HexPosition:
        return HexPosition(
            self.base_position.q + dq,
            self.base_position.r + dr,
            self.base_position.z,
        )

    def can_place_at(self, grid: HexGrid) -> bool:
        """Check every occupied cell exists and meets the template's requirements."""
        required_terrain = self.template.required_terrain
        elevation_req = self.template.elevation_requirements

        for pos in self.occupied_positions:
            cell = grid.get_cell(pos)
            if cell is None:
                return False

            if required_terrain is not None and cell.terrain != required_terrain:
                return False

            if elevation_req is not None:
                reference = self._reference_elevation(grid) if elevation_req.relative_to_base else 0
                relative = cell.elevation - reference
                if relative < elevation_req.min or relative > elevation_req.max:
                    return False
        return True

    def _reference_elevation(self, grid: HexGrid) -> int:
        base_cell = grid.get_cell(self.base_position)
        return base_cell.elevation if base_cell is not None else 0

    def apply_to_grid(self, grid: HexGrid) -> int:
        """Stamp footprint terrain onto existing cells, keeping their elevation.

        Offsets without a cell are skipped. Returns the number of cells changed.
        """
        applied = 0
        for offset in self.template.footprint:
            pos = self._offset_position(offset.q, offset.r)
            cell = grid.get_cell(pos)
            if cell is None:
                continue
            grid.add_cell(pos, offset.terrain, cell.elevation)
            applied += 1
        return applied

    def __repr__(self) -> str:
        return (
            f"Structure({self.template.name!r}, base={tuple(self.base_position)}, "
            f"cells={len(self.occupied_positions)})"
        )
