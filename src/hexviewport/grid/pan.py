from __future__ import annotations

from dataclasses import dataclass

from hexviewport.grid.geometry import ORIGIN, GeometryConstants, WorldPoint
from hexviewport.grid.viewport import ViewportWindow
from hexviewport.grid.world import GridStore, HexCoord

PAN_IDLE = "idle"
PAN_DRAGGING = "dragging"
DEFAULT_DRAG_THRESHOLD = 1.0


class DragStateError(RuntimeError):
    """Drag event received while no drag is in progress."""


@dataclass(frozen=True)
class PanOutcome:
    recentered: bool
    center: HexCoord | None
    visible: frozenset[HexCoord]
    total_delta: WorldPoint


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


class PanController:
    """Turns a drag gesture into at most one viewport recenter.

    Dragging the map one way moves the focus the other way, so the world
    displacement is negated before it is converted into columns and rows.
    """

    def __init__(
        self,
        grid: GridStore,
        window: ViewportWindow,
        constants: GeometryConstants,
        *,
        radius: int,
        drag_threshold: float = DEFAULT_DRAG_THRESHOLD,
    ) -> None:
        self.grid = grid
        self.window = window
        self.constants = constants
        self.radius = radius
        self.drag_threshold = drag_threshold
        self.state = PAN_IDLE
        self.drag_start_point = ORIGIN
        self.last_point = ORIGIN
        self.drag_start_cell: HexCoord | None = None

    def begin_drag(self, world_point: WorldPoint, touched_cell: HexCoord | None = None) -> None:
        self.drag_start_point = world_point
        self.last_point = world_point
        self.drag_start_cell = touched_cell if touched_cell is not None else self.window.center
        self.state = PAN_DRAGGING

    def continue_drag(self, world_point: WorldPoint) -> WorldPoint:
        self._require_dragging("continue_drag")
        delta = (world_point - self.last_point).flattened()
        self.last_point = world_point
        return delta

    def end_drag(self, world_point: WorldPoint) -> PanOutcome:
        self._require_dragging("end_drag")
        try:
            return self._settle(world_point)
        finally:
            self.state = PAN_IDLE
            self.drag_start_cell = None

    def _settle(self, world_point: WorldPoint) -> PanOutcome:
        total_delta = (world_point - self.drag_start_point).flattened()
        current_center = self.window.center
        if total_delta.magnitude() <= self.drag_threshold or self.drag_start_cell is None:
            return PanOutcome(False, current_center, self.window.visible, total_delta)

        column_delta = round(-total_delta.x / self.constants.horizontal_spacing)
        row_delta = round(-total_delta.z / self.constants.vertical_spacing)
        new_column = _clamp(self.drag_start_cell.q + column_delta, 0, self.grid.num_columns - 1)
        new_row = _clamp(self.drag_start_cell.r + row_delta, 0, self.grid.num_rows - 1)
        new_center = self.grid.get(new_column, new_row).coord

        if new_center == current_center:
            return PanOutcome(False, current_center, self.window.visible, total_delta)
        visible = self.window.recenter(new_center, self.radius)
        return PanOutcome(True, new_center, visible, total_delta)

    def _require_dragging(self, operation: str) -> None:
        if self.state != PAN_DRAGGING:
            raise DragStateError(f"{operation} called while pan controller is {self.state}")
