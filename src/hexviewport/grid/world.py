from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

DEFAULT_TERRAIN_OPTIONS = ("plains", "forest", "hills", "water")


class InvalidDimension(ValueError):
    """Grid generated with a non-positive column or row count."""


class InvalidRadius(ValueError):
    """Viewport window radius below zero."""


class OutOfBounds(IndexError):
    """Grid index outside [0, num_columns) x [0, num_rows)."""


@dataclass(frozen=True, order=True)
class HexCoord:
    """Axial hex coordinate (q, r); the cube component s is derived."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -(self.q + self.r)

    def neighbors(self) -> tuple[HexCoord, ...]:
        return tuple(HexCoord(self.q + delta.q, self.r + delta.r) for delta in AXIAL_DIRECTIONS)

    def distance_to(self, other: HexCoord) -> int:
        return (abs(self.q - other.q) + abs(self.r - other.r) + abs(self.s - other.s)) // 2


AXIAL_DIRECTIONS: tuple[HexCoord, ...] = (
    HexCoord(1, 0),
    HexCoord(1, -1),
    HexCoord(0, -1),
    HexCoord(-1, 0),
    HexCoord(-1, 1),
    HexCoord(0, 1),
)

PayloadChooser = Callable[[HexCoord], str]


@dataclass(frozen=True)
class HexCell:
    coord: HexCoord
    terrain_type: str

    @property
    def column(self) -> int:
        return self.coord.q

    @property
    def row(self) -> int:
        return self.coord.r


def _require_dimension(value: int, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimension(f"{field_name} must be an integer")
    if value <= 0:
        raise InvalidDimension(f"{field_name} must be > 0 (got {value})")
    return value


class GridStore:
    """Dense column-major table of hex cells, written once at generation time."""

    def __init__(self, columns: tuple[tuple[HexCell, ...], ...]) -> None:
        if not columns or not columns[0]:
            raise InvalidDimension("grid requires at least one column and one row")
        self._columns = columns
        self.num_columns = len(columns)
        self.num_rows = len(columns[0])

    @classmethod
    def generate(cls, num_columns: int, num_rows: int, payload_chooser: PayloadChooser) -> GridStore:
        _require_dimension(num_columns, field_name="num_columns")
        _require_dimension(num_rows, field_name="num_rows")

        columns: list[tuple[HexCell, ...]] = []
        for column in range(num_columns):
            cells: list[HexCell] = []
            for row in range(num_rows):
                coord = HexCoord(q=column, r=row)
                cells.append(HexCell(coord=coord, terrain_type=payload_chooser(coord)))
            columns.append(tuple(cells))
        return cls(tuple(columns))

    def contains(self, column: int, row: int) -> bool:
        return 0 <= column < self.num_columns and 0 <= row < self.num_rows

    def get(self, column: int, row: int) -> HexCell:
        if not self.contains(column, row):
            raise OutOfBounds(
                f"cell ({column}, {row}) outside grid {self.num_columns}x{self.num_rows}"
            )
        return self._columns[column][row]

    def cell_at(self, coord: HexCoord) -> HexCell:
        return self.get(coord.q, coord.r)

    def cells(self) -> Iterator[HexCell]:
        for column_cells in self._columns:
            yield from column_cells

    def __len__(self) -> int:
        return self.num_columns * self.num_rows
