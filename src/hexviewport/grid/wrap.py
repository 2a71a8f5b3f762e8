from __future__ import annotations

from hexviewport.grid.geometry import GeometryConstants, HexGeometry, WorldPoint
from hexviewport.grid.world import HexCoord


def wrap_axis(value: float, camera_value: float, extent: float) -> float:
    """Return the periodic copy of ``value`` whose offset from the camera lies in (-extent/2, extent/2]."""
    extents_from_camera = (value - camera_value) / extent

    # Bias by half an extent toward the sign, then truncate toward zero.
    if extents_from_camera > 0:
        extents_from_camera += 0.5
    else:
        extents_from_camera -= 0.5
    shift = int(extents_from_camera)

    if (value - camera_value) - shift * extent <= -extent / 2.0:
        shift -= 1
    return value - shift * extent


class WrapProjector:
    """Places each hex at the copy nearest the camera on every wrapping axis."""

    def __init__(self, constants: GeometryConstants, num_columns: int, num_rows: int) -> None:
        self.constants = constants
        self.map_width = constants.horizontal_spacing * num_columns
        self.map_height = constants.vertical_spacing * num_rows

    def project(self, position: WorldPoint, camera_position: WorldPoint) -> WorldPoint:
        x = position.x
        z = position.z
        if self.constants.wrap_east_west:
            x = wrap_axis(x, camera_position.x, self.map_width)
        if self.constants.wrap_north_south:
            z = wrap_axis(z, camera_position.z, self.map_height)
        return WorldPoint(x, position.y, z)

    def position_from_camera(self, coord: HexCoord, camera_position: WorldPoint, geometry: HexGeometry) -> WorldPoint:
        return self.project(geometry.position(coord), camera_position)
