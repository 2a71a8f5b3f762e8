from __future__ import annotations

from dataclasses import dataclass

from hexviewport.grid.pan import DEFAULT_DRAG_THRESHOLD
from hexviewport.grid.world import DEFAULT_TERRAIN_OPTIONS, InvalidDimension, InvalidRadius, OutOfBounds


@dataclass(frozen=True)
class ViewportConfig:
    """Map and viewport settings supplied by the front end."""

    hex_radius: float = 1.0
    num_columns: int = 20
    num_rows: int = 20
    window_radius: int = 5
    wrap_east_west: bool = True
    wrap_north_south: bool = False
    drag_threshold: float = DEFAULT_DRAG_THRESHOLD
    start_column: int = 0
    start_row: int = 0
    seed: int = 7
    terrain_options: tuple[str, ...] = DEFAULT_TERRAIN_OPTIONS

    def __post_init__(self) -> None:
        if self.num_columns <= 0 or self.num_rows <= 0:
            raise InvalidDimension(
                f"num_columns and num_rows must be > 0 (got {self.num_columns}x{self.num_rows})"
            )
        if self.window_radius < 0:
            raise InvalidRadius(f"window_radius must be >= 0 (got {self.window_radius})")
        if self.hex_radius <= 0:
            raise ValueError(f"hex_radius must be > 0 (got {self.hex_radius})")
        if self.drag_threshold < 0:
            raise ValueError(f"drag_threshold must be >= 0 (got {self.drag_threshold})")
        if not (0 <= self.start_column < self.num_columns and 0 <= self.start_row < self.num_rows):
            raise OutOfBounds(f"start cell ({self.start_column}, {self.start_row}) outside grid")
        if not self.terrain_options:
            raise ValueError("terrain_options must not be empty")
