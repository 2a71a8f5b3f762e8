from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from hexviewport.grid.world import HexCoord, InvalidRadius, OutOfBounds


class ViewportListener(Protocol):
    """Receives the cells that entered or left the window after a recenter."""

    def on_cells_entered(self, cells: frozenset[HexCoord]) -> None: ...

    def on_cells_exited(self, cells: frozenset[HexCoord]) -> None: ...


@dataclass(frozen=True)
class ViewportState:
    center: HexCoord
    radius: int


def _clamp(value: int, lower: int, upper: int) -> int:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def _require_radius(radius: int) -> int:
    if isinstance(radius, bool) or not isinstance(radius, int):
        raise InvalidRadius("radius must be an integer")
    if radius < 0:
        raise InvalidRadius(f"radius must be >= 0 (got {radius})")
    return radius


def compute_visible(center: HexCoord, radius: int, num_columns: int, num_rows: int) -> frozenset[HexCoord]:
    """Cells drawn around ``center``.

    Each limit is clamped against the center itself, so near the grid edges the
    window shrinks instead of sliding, and it never pulls in wrapped cells.
    Upper limits are exclusive.
    """
    _require_radius(radius)
    west_limit = _clamp(center.q - radius, 0, center.q)
    east_limit = _clamp(center.q + radius, center.q, num_columns)
    south_limit = _clamp(center.r - radius, 0, center.r)
    north_limit = _clamp(center.r + radius, center.r, num_rows)
    return frozenset(
        HexCoord(column, row)
        for column in range(west_limit, east_limit)
        for row in range(south_limit, north_limit)
    )


class ViewportWindow:
    """Holds the current window center and the cells visible around it."""

    def __init__(self, num_columns: int, num_rows: int, listener: ViewportListener | None = None) -> None:
        self.num_columns = num_columns
        self.num_rows = num_rows
        self.listener = listener
        self.state: ViewportState | None = None
        self._visible: frozenset[HexCoord] = frozenset()

    @property
    def center(self) -> HexCoord | None:
        return self.state.center if self.state is not None else None

    @property
    def visible(self) -> frozenset[HexCoord]:
        return self._visible

    def recenter(self, new_center: HexCoord, radius: int) -> frozenset[HexCoord]:
        _require_radius(radius)
        if self.state is not None and self.state.center == new_center:
            return self._visible
        if not (0 <= new_center.q < self.num_columns and 0 <= new_center.r < self.num_rows):
            raise OutOfBounds(
                f"center ({new_center.q}, {new_center.r}) outside grid {self.num_columns}x{self.num_rows}"
            )

        previous = self._visible
        visible = compute_visible(new_center, radius, self.num_columns, self.num_rows)
        self.state = ViewportState(center=new_center, radius=radius)
        self._visible = visible
        self._notify(previous, visible)
        return visible

    def _notify(self, previous: frozenset[HexCoord], current: frozenset[HexCoord]) -> None:
        if self.listener is None:
            return
        exited = previous - current
        entered = current - previous
        if exited:
            self.listener.on_cells_exited(exited)
        if entered:
            self.listener.on_cells_entered(entered)
