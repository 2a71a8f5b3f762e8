from __future__ import annotations

import math
from dataclasses import dataclass

from hexviewport.grid.world import HexCoord

WIDTH_MULTIPLIER = math.sqrt(3.0) / 2.0
VERTICAL_SPACING_FACTOR = 0.75


@dataclass(frozen=True)
class WorldPoint:
    """World-space point; y is up, the map lies on the x/z plane."""

    x: float
    y: float
    z: float

    def __add__(self, other: WorldPoint) -> WorldPoint:
        return WorldPoint(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: WorldPoint) -> WorldPoint:
        return WorldPoint(self.x - other.x, self.y - other.y, self.z - other.z)

    def flattened(self) -> WorldPoint:
        return WorldPoint(self.x, 0.0, self.z)

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


ORIGIN = WorldPoint(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class GeometryConstants:
    """Spacing and wrap settings shared by every spacing computation on one map."""

    hex_radius: float
    horizontal_spacing: float
    vertical_spacing: float
    wrap_east_west: bool = True
    wrap_north_south: bool = False


class HexGeometry:
    """Axial-to-world projection for hexes of a given radius.

    Rows are offset by half a column per row, so ``x = spacing * (q + r / 2)``.
    """

    def __init__(self, radius: float = 1.0) -> None:
        self.radius = radius

    def hex_height(self) -> float:
        return self.radius * 2.0

    def hex_width(self) -> float:
        return WIDTH_MULTIPLIER * self.hex_height()

    def vertical_spacing(self) -> float:
        return self.hex_height() * VERTICAL_SPACING_FACTOR

    def horizontal_spacing(self) -> float:
        return self.hex_width()

    def position(self, coord: HexCoord) -> WorldPoint:
        return WorldPoint(
            self.horizontal_spacing() * (coord.q + coord.r / 2.0),
            0.0,
            self.vertical_spacing() * coord.r,
        )

    def world_to_axial(self, x: float, z: float) -> HexCoord:
        frac_r = z / self.vertical_spacing()
        frac_q = x / self.horizontal_spacing() - frac_r / 2.0
        return _cube_round(frac_q, frac_r)

    def constants(self, *, wrap_east_west: bool = True, wrap_north_south: bool = False) -> GeometryConstants:
        return GeometryConstants(
            hex_radius=self.radius,
            horizontal_spacing=self.horizontal_spacing(),
            vertical_spacing=self.vertical_spacing(),
            wrap_east_west=wrap_east_west,
            wrap_north_south=wrap_north_south,
        )


def _cube_round(frac_q: float, frac_r: float) -> HexCoord:
    frac_s = -frac_q - frac_r
    q = round(frac_q)
    r = round(frac_r)
    s = round(frac_s)

    q_diff = abs(q - frac_q)
    r_diff = abs(r - frac_r)
    s_diff = abs(s - frac_s)

    # Re-derive the component that moved most so q + r + s stays 0.
    if q_diff > r_diff and q_diff > s_diff:
        q = -r - s
    elif r_diff > s_diff:
        r = -q - s
    return HexCoord(int(q), int(r))
