from __future__ import annotations

from hexviewport.grid.config import ViewportConfig
from hexviewport.grid.geometry import WorldPoint
from hexviewport.grid.hex_map import HexMap
from hexviewport.grid.pan import PanOutcome
from hexviewport.grid.world import HexCoord


class AsciiViewer:
    """Read-only projection of the visible window for terminal display."""

    def render(self, hex_map: HexMap) -> str:
        center = hex_map.center
        lines: list[str] = [
            f"center=({center.q},{center.r}) radius={hex_map.config.window_radius} "
            f"grid={hex_map.grid.num_columns}x{hex_map.grid.num_rows}"
        ]

        cells = hex_map.visible_cells()
        if not cells:
            return "\n".join(lines + ["<empty window>"])

        by_row: dict[int, list[str]] = {}
        for cell in sorted(cells, key=lambda c: (c.row, c.column)):
            marker = "*" if cell.coord == center else " "
            by_row.setdefault(cell.row, []).append(f"({cell.column:>2},{cell.row:>2}){marker}{cell.terrain_type[:3]}")

        for r in sorted(by_row, reverse=True):
            lines.append(f"r={r:>2}: " + " | ".join(by_row[r]))
        return "\n".join(lines)


class PanCommandController:
    """Feeds typed drag commands through the pan controller; does not own state."""

    def __init__(self, hex_map: HexMap) -> None:
        self.hex_map = hex_map

    def drag(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        touched_cell: HexCoord | None = None,
    ) -> PanOutcome:
        pan = self.hex_map.pan
        pan.begin_drag(WorldPoint(start[0], 0.0, start[1]), touched_cell)
        return pan.end_drag(WorldPoint(end[0], 0.0, end[1]))

    def center_on(self, q: int, r: int) -> bool:
        if not self.hex_map.grid.contains(q, r):
            return False
        self.hex_map.window.recenter(HexCoord(q, r), self.hex_map.config.window_radius)
        return True


def run_demo(config: ViewportConfig | None = None) -> None:
    hex_map = HexMap(config or ViewportConfig())
    view = AsciiViewer()
    controller = PanCommandController(hex_map)

    print("Hexviewport demo. Commands: show | drag <x0> <z0> <x1> <z1> [q r] | center <q> <r> | quit")
    print(view.render(hex_map))

    while True:
        raw = input("> ").strip()
        if raw in {"quit", "exit"}:
            break
        if raw == "show":
            print(view.render(hex_map))
            continue

        parts = raw.split()
        if parts and parts[0] == "drag" and len(parts) in (5, 7):
            touched = HexCoord(int(parts[5]), int(parts[6])) if len(parts) == 7 else None
            outcome = controller.drag(
                (float(parts[1]), float(parts[2])),
                (float(parts[3]), float(parts[4])),
                touched,
            )
            print("recentered" if outcome.recentered else "no recenter")
            print(view.render(hex_map))
            continue
        if len(parts) == 3 and parts[0] == "center":
            if controller.center_on(int(parts[1]), int(parts[2])):
                print(view.render(hex_map))
            else:
                print("cell outside grid")
            continue

        print("unknown command")


if __name__ == "__main__":
    run_demo()
