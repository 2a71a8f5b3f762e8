import pytest

import hexviewport.grid.viewport as viewport_module
from hexviewport.grid.config import ViewportConfig
from hexviewport.grid.geometry import WorldPoint
from hexviewport.grid.hex_map import HexMap
from hexviewport.grid.pan import PAN_DRAGGING, PAN_IDLE, DragStateError
from hexviewport.grid.rng import cycling_payload_chooser
from hexviewport.grid.world import HexCoord


def _hex_map(**overrides: object) -> HexMap:
    settings: dict[str, object] = {
        "num_columns": 20,
        "num_rows": 20,
        "window_radius": 1,
        "start_column": 5,
        "start_row": 5,
    }
    settings.update(overrides)
    return HexMap(ViewportConfig(**settings), payload_chooser=cycling_payload_chooser(("plains", "hills")))  # type: ignore[arg-type]


def test_drag_west_from_touched_cell_recenters_three_columns_east() -> None:
    hex_map = _hex_map()
    pan = hex_map.pan

    pan.begin_drag(WorldPoint(0.0, 0.0, 0.0), HexCoord(5, 5))
    assert pan.state == PAN_DRAGGING
    outcome = pan.end_drag(WorldPoint(-5.2, 0.0, 0.0))

    assert outcome.total_delta == WorldPoint(-5.2, 0.0, 0.0)
    assert outcome.recentered is True
    assert outcome.center == HexCoord(8, 5)
    assert hex_map.center == HexCoord(8, 5)
    assert outcome.visible == frozenset({HexCoord(7, 4), HexCoord(7, 5), HexCoord(8, 4), HexCoord(8, 5)})
    assert pan.state == PAN_IDLE


def test_drag_below_threshold_is_treated_as_click() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0), HexCoord(9, 9))
    outcome = hex_map.pan.end_drag(WorldPoint(0.5, 0.0, 0.0))

    assert outcome.recentered is False
    assert hex_map.center == HexCoord(5, 5)
    assert hex_map.pan.state == PAN_IDLE


def test_drag_exactly_at_threshold_does_not_recenter() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0))
    outcome = hex_map.pan.end_drag(WorldPoint(-1.0, 0.0, 0.0))

    assert outcome.recentered is False
    assert hex_map.center == HexCoord(5, 5)


def test_vertical_displacement_is_ignored() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0))
    outcome = hex_map.pan.end_drag(WorldPoint(0.0, 50.0, 0.0))

    assert outcome.total_delta == WorldPoint(0.0, 0.0, 0.0)
    assert outcome.recentered is False


def test_drag_without_touched_cell_starts_from_current_center() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(3.0, 0.0, 0.0))
    outcome = hex_map.pan.end_drag(WorldPoint(3.0, 0.0, -3.1))

    assert outcome.center == HexCoord(5, 7)


def test_drag_east_moves_focus_west() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0), HexCoord(5, 5))
    outcome = hex_map.pan.end_drag(WorldPoint(3.5, 0.0, 0.0))

    assert outcome.center == HexCoord(3, 5)


def test_candidate_center_is_clamped_to_grid() -> None:
    hex_map = _hex_map()

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0), HexCoord(5, 5))
    east = hex_map.pan.end_drag(WorldPoint(-1000.0, 0.0, 1000.0))
    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0))
    west = hex_map.pan.end_drag(WorldPoint(1000.0, 0.0, -1000.0))

    assert east.center == HexCoord(19, 0)
    assert west.center == HexCoord(0, 19)


def test_unchanged_center_skips_window_recompute(monkeypatch: pytest.MonkeyPatch) -> None:
    hex_map = _hex_map()
    calls: list[HexCoord] = []
    original = viewport_module.compute_visible

    def counting_compute_visible(center: HexCoord, radius: int, num_columns: int, num_rows: int) -> frozenset[HexCoord]:
        calls.append(center)
        return original(center, radius, num_columns, num_rows)

    monkeypatch.setattr(viewport_module, "compute_visible", counting_compute_visible)
    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0), HexCoord(4, 5))
    outcome = hex_map.pan.end_drag(WorldPoint(-1.2, 0.0, 0.0))

    assert outcome.recentered is False
    assert outcome.center == HexCoord(5, 5)
    assert calls == []


def test_continue_drag_reports_flattened_frame_delta() -> None:
    hex_map = _hex_map()
    pan = hex_map.pan

    pan.begin_drag(WorldPoint(0.0, 0.0, 0.0))
    first = pan.continue_drag(WorldPoint(1.0, 2.0, 1.0))
    second = pan.continue_drag(WorldPoint(1.5, 0.0, 3.0))

    assert first == WorldPoint(1.0, 0.0, 1.0)
    assert second == WorldPoint(0.5, 0.0, 2.0)
    assert hex_map.center == HexCoord(5, 5)


def test_drag_events_while_idle_are_rejected() -> None:
    hex_map = _hex_map()

    with pytest.raises(DragStateError):
        hex_map.pan.continue_drag(WorldPoint(1.0, 0.0, 0.0))
    with pytest.raises(DragStateError):
        hex_map.pan.end_drag(WorldPoint(1.0, 0.0, 0.0))


def test_drag_threshold_is_configurable() -> None:
    hex_map = _hex_map(drag_threshold=10.0)

    hex_map.pan.begin_drag(WorldPoint(0.0, 0.0, 0.0))
    outcome = hex_map.pan.end_drag(WorldPoint(-5.2, 0.0, 0.0))

    assert outcome.recentered is False
