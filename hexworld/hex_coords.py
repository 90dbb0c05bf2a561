"""Axial hex coordinate utilities.

Hex edge numbering (clockwise from East):
    Edge 0: E   (+1,  0)
    Edge 1: NE  (+1, -1)
    Edge 2: NW  ( 0, -1)
    Edge 3: W   (-1,  0)
    Edge 4: SW  (-1, +1)
    Edge 5: SE  ( 0, +1)

Positions carry a third, vertical coordinate ``z`` (elevation). Distance
mixes the planar cube metric with the vertical offset, so it reads as a
travel cost rather than a geometric length.
"""

from typing import NamedTuple


class AxialOffset(NamedTuple):
    """Offset for hex neighbor lookup."""
    dq: int
    dr: int


# Neighbor offsets indexed by edge number (clockwise from E)
HEX_NEIGHBOR_OFFSETS: list[AxialOffset] = [
    AxialOffset(+1,  0),  # Edge 0: E
    AxialOffset(+1, -1),  # Edge 1: NE
    AxialOffset( 0, -1),  # Edge 2: NW
    AxialOffset(-1,  0),  # Edge 3: W
    AxialOffset(-1, +1),  # Edge 4: SW
    AxialOffset( 0, +1),  # Edge 5: SE
]


class HexPosition(NamedTuple):
    """Axial hex position with a vertical component.

    ``q`` and ``r`` are axial planar coordinates, ``z`` is the elevation
    layer the position sits on.
    """
    q: int
    r: int
    z: int = 0

    @classmethod
    def new_2d(cls, q: int, r: int) -> "HexPosition":
        return cls(q, r, 0)

    def cube_coords(self) -> tuple[int, int, int]:
        """Cube coordinates (x, y, z) of the planar part."""
        x = self.q
        z = self.r
        y = -x - z
        return (x, y, z)

    def planar(self) -> tuple[int, int]:
        return (self.q, self.r)

    def offset(self, dq: int, dr: int, dz: int = 0) -> "HexPosition":
        return HexPosition(self.q + dq, self.r + dr, self.z + dz)

    def with_z(self, z: int) -> "HexPosition":
        return HexPosition(self.q, self.r, z)

    def distance(self, other: "HexPosition") -> int:
        """Planar cube distance plus the absolute elevation difference.

        distance((0,0,0), (1,1,2)) == 4: two steps in the plane, two up.
        """
        x1, y1, z1 = self.cube_coords()
        x2, y2, z2 = other.cube_coords()
        planar_distance = (abs(x1 - x2) + abs(y1 - y2) + abs(z1 - z2)) // 2
        height_difference = abs(self.z - other.z)
        return planar_distance + height_difference


def get_all_neighbors(q: int, r: int) -> list[tuple[int, int, int]]:
    """Get all 6 neighbors with their connecting edge.

    Returns:
        List of (neighbor_q, neighbor_r, edge_from_center)
    """
    return [
        (q + offset.dq, r + offset.dr, edge)
        for edge, offset in enumerate(HEX_NEIGHBOR_OFFSETS)
    ]
