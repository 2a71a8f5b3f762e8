from __future__ import annotations

from hexviewport.grid.config import ViewportConfig
from hexviewport.grid.geometry import HexGeometry, WorldPoint
from hexviewport.grid.pan import PanController
from hexviewport.grid.rng import seeded_payload_chooser
from hexviewport.grid.viewport import ViewportListener, ViewportWindow
from hexviewport.grid.world import GridStore, HexCell, HexCoord, PayloadChooser
from hexviewport.grid.wrap import WrapProjector


class HexMap:
    """Generated grid plus the windowing state used to display part of it.

    Spacing constants come from a reference hex at (0, 0) and are shared by the
    wrap projector and the pan controller.
    """

    def __init__(
        self,
        config: ViewportConfig,
        *,
        payload_chooser: PayloadChooser | None = None,
        listener: ViewportListener | None = None,
    ) -> None:
        self.config = config
        self.geometry = HexGeometry(config.hex_radius)
        self.constants = self.geometry.constants(
            wrap_east_west=config.wrap_east_west,
            wrap_north_south=config.wrap_north_south,
        )
        chooser = payload_chooser or seeded_payload_chooser(config.seed, config.terrain_options)
        self.grid = GridStore.generate(config.num_columns, config.num_rows, chooser)
        self.projector = WrapProjector(self.constants, config.num_columns, config.num_rows)
        self.window = ViewportWindow(config.num_columns, config.num_rows, listener=listener)
        self.pan = PanController(
            self.grid,
            self.window,
            self.constants,
            radius=config.window_radius,
            drag_threshold=config.drag_threshold,
        )
        self.window.recenter(self.grid.get(config.start_column, config.start_row).coord, config.window_radius)

    @property
    def center(self) -> HexCoord:
        center = self.window.center
        assert center is not None
        return center

    def visible_cells(self) -> list[HexCell]:
        return [self.grid.cell_at(coord) for coord in sorted(self.window.visible)]

    def wrapped_position(self, coord: HexCoord, camera_position: WorldPoint) -> WorldPoint:
        return self.projector.position_from_camera(coord, camera_position, self.geometry)

    def cell_under(self, world_point: WorldPoint) -> HexCoord | None:
        """Visible cell whose wrapped copy covers ``world_point``, if any."""
        coord = self.geometry.world_to_axial(world_point.x, world_point.z)
        column = coord.q
        if self.constants.wrap_east_west:
            # Row offset is folded into q, so east-west copies differ by whole map widths in q.
            column = column % self.grid.num_columns
        candidate = HexCoord(column, coord.r)
        if candidate in self.window.visible:
            return candidate
        return None
