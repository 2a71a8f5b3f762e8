import dataclasses

import pytest

import hexviewport.grid.viewport as viewport_module
from hexviewport.grid.viewport import ViewportState, ViewportWindow, compute_visible
from hexviewport.grid.world import HexCoord, InvalidRadius, OutOfBounds


def _block(columns: range, rows: range) -> frozenset[HexCoord]:
    return frozenset(HexCoord(q, r) for q in columns for r in rows)


class RecordingListener:
    def __init__(self) -> None:
        self.entered: list[frozenset[HexCoord]] = []
        self.exited: list[frozenset[HexCoord]] = []

    def on_cells_entered(self, cells: frozenset[HexCoord]) -> None:
        self.entered.append(cells)

    def on_cells_exited(self, cells: frozenset[HexCoord]) -> None:
        self.exited.append(cells)


def test_compute_visible_upper_limits_are_exclusive() -> None:
    visible = compute_visible(HexCoord(8, 5), 1, 20, 20)

    assert visible == _block(range(7, 9), range(4, 6))


def test_compute_visible_shrinks_at_grid_edges() -> None:
    assert compute_visible(HexCoord(0, 0), 2, 20, 20) == _block(range(0, 2), range(0, 2))
    assert compute_visible(HexCoord(19, 19), 3, 20, 20) == _block(range(16, 20), range(16, 20))


def test_compute_visible_stays_within_radius_and_grid_bounds() -> None:
    num_columns, num_rows = 9, 7
    for q in range(num_columns):
        for r in range(num_rows):
            for radius in (0, 1, 2, 4):
                for cell in compute_visible(HexCoord(q, r), radius, num_columns, num_rows):
                    assert q - radius <= cell.q <= q + radius
                    assert r - radius <= cell.r <= r + radius
                    assert 0 <= cell.q < num_columns
                    assert 0 <= cell.r < num_rows


def test_compute_visible_covers_full_grid_for_large_radius() -> None:
    full_grid = _block(range(6), range(4))

    assert compute_visible(HexCoord(3, 2), 6, 6, 4) == full_grid
    assert compute_visible(HexCoord(0, 0), 10, 6, 4) == full_grid


def test_compute_visible_does_not_pull_in_wrapped_columns() -> None:
    visible = compute_visible(HexCoord(0, 5), 3, 20, 20)

    assert all(cell.q < 3 for cell in visible)


def test_negative_radius_is_rejected() -> None:
    with pytest.raises(InvalidRadius):
        compute_visible(HexCoord(1, 1), -1, 5, 5)
    with pytest.raises(InvalidRadius):
        ViewportWindow(5, 5).recenter(HexCoord(1, 1), -2)


def test_recenter_outside_grid_is_rejected() -> None:
    window = ViewportWindow(5, 5)

    with pytest.raises(OutOfBounds):
        window.recenter(HexCoord(5, 0), 1)
    assert window.state is None


def test_recenter_same_center_returns_previous_set_without_recompute(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[HexCoord] = []
    original = viewport_module.compute_visible

    def counting_compute_visible(center: HexCoord, radius: int, num_columns: int, num_rows: int) -> frozenset[HexCoord]:
        calls.append(center)
        return original(center, radius, num_columns, num_rows)

    monkeypatch.setattr(viewport_module, "compute_visible", counting_compute_visible)
    window = ViewportWindow(20, 20)

    first = window.recenter(HexCoord(5, 5), 2)
    second = window.recenter(HexCoord(5, 5), 2)

    assert first == second
    assert calls == [HexCoord(5, 5)]


def test_recenter_replaces_state_instead_of_mutating_it() -> None:
    window = ViewportWindow(20, 20)
    window.recenter(HexCoord(2, 2), 1)
    first_state = window.state

    window.recenter(HexCoord(3, 2), 1)

    assert first_state == ViewportState(center=HexCoord(2, 2), radius=1)
    assert window.state == ViewportState(center=HexCoord(3, 2), radius=1)
    assert window.center == HexCoord(3, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        window.state.radius = 4  # type: ignore[misc,union-attr]


def test_listener_receives_only_window_deltas() -> None:
    listener = RecordingListener()
    window = ViewportWindow(20, 20, listener=listener)

    window.recenter(HexCoord(5, 5), 2)
    window.recenter(HexCoord(6, 5), 2)
    window.recenter(HexCoord(6, 5), 2)

    assert listener.entered == [_block(range(3, 7), range(3, 7)), _block(range(7, 8), range(3, 7))]
    assert listener.exited == [_block(range(3, 4), range(3, 7))]
