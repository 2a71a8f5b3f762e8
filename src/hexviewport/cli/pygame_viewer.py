from __future__ import annotations

import argparse
import importlib.metadata
import math
import os
import platform
import sys
from typing import Any

from hexviewport.grid.config import ViewportConfig
from hexviewport.grid.geometry import ORIGIN, WorldPoint
from hexviewport.grid.hex_map import HexMap
from hexviewport.grid.pan import PAN_DRAGGING
from hexviewport.grid.world import HexCoord

HEX_SIZE = 28
WINDOW_SIZE = (1280, 800)
VIEWPORT_MARGIN = 12
HUD_HEIGHT = 36

TERRAIN_COLORS: dict[str, tuple[int, int, int]] = {
    "plains": (132, 168, 94),
    "forest": (61, 120, 72),
    "hills": (153, 126, 90),
    "water": (70, 118, 186),
}
CENTER_OUTLINE_COLOR = (240, 220, 90)
GRID_LINE_COLOR = (35, 35, 40)

pygame: Any | None = None


class VisibleHexLayer:
    """Renderer-side set of drawn hexes, updated only by window deltas."""

    def __init__(self) -> None:
        self.cells: set[HexCoord] = set()
        self.entered_total = 0
        self.exited_total = 0

    def on_cells_entered(self, cells: frozenset[HexCoord]) -> None:
        self.cells.update(cells)
        self.entered_total += len(cells)

    def on_cells_exited(self, cells: frozenset[HexCoord]) -> None:
        self.cells.difference_update(cells)
        self.exited_total += len(cells)


def _pixel_to_world(pixel_x: int, pixel_y: int, center: tuple[float, float]) -> WorldPoint:
    return WorldPoint((pixel_x - center[0]) / HEX_SIZE, 0.0, (center[1] - pixel_y) / HEX_SIZE)


def _world_to_pixel(point: WorldPoint, center: tuple[float, float]) -> tuple[float, float]:
    return (center[0] + point.x * HEX_SIZE, center[1] - point.z * HEX_SIZE)


def _hex_points(center: tuple[float, float], hex_radius: float) -> list[tuple[float, float]]:
    size = hex_radius * HEX_SIZE
    points: list[tuple[float, float]] = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        points.append((center[0] + size * math.cos(angle), center[1] + size * math.sin(angle)))
    return points


def _initial_map_offset(hex_map: HexMap) -> WorldPoint:
    return ORIGIN - hex_map.geometry.position(hex_map.center)


def _viewport_rect() -> pygame.Rect:
    return pygame.Rect(
        VIEWPORT_MARGIN,
        VIEWPORT_MARGIN + HUD_HEIGHT,
        WINDOW_SIZE[0] - (VIEWPORT_MARGIN * 2),
        WINDOW_SIZE[1] - (VIEWPORT_MARGIN * 2) - HUD_HEIGHT,
    )


def _draw_map(
    screen: pygame.Surface,
    hex_map: HexMap,
    layer: VisibleHexLayer,
    map_offset: WorldPoint,
    center: tuple[float, float],
    *,
    clip_rect: pygame.Rect,
) -> None:
    old_clip = screen.get_clip()
    screen.set_clip(clip_rect)
    # The camera stays at the world origin; the map itself is what moves.
    camera_local = ORIGIN - map_offset
    for coord in sorted(layer.cells):
        local = hex_map.wrapped_position(coord, camera_local)
        pixel = _world_to_pixel(local + map_offset, center)
        points = _hex_points(pixel, hex_map.config.hex_radius)
        terrain_type = hex_map.grid.cell_at(coord).terrain_type
        pygame.draw.polygon(screen, TERRAIN_COLORS.get(terrain_type, (90, 90, 96)), points)
        outline = CENTER_OUTLINE_COLOR if coord == hex_map.center else GRID_LINE_COLOR
        pygame.draw.polygon(screen, outline, points, 2 if coord == hex_map.center else 1)
    screen.set_clip(old_clip)


def _draw_hud(
    screen: pygame.Surface,
    hex_map: HexMap,
    layer: VisibleHexLayer,
    font: pygame.font.Font,
    status_message: str | None,
) -> None:
    center = hex_map.center
    text = (
        f"center=({center.q},{center.r}) visible={len(layer.cells)} "
        f"drag={hex_map.pan.state} entered={layer.entered_total} exited={layer.exited_total}"
    )
    if status_message:
        text = f"{text}  {status_message}"
    screen.blit(font.render(text, True, (230, 230, 230)), (VIEWPORT_MARGIN, VIEWPORT_MARGIN))


def _build_parser() -> argparse.ArgumentParser:
    defaults = ViewportConfig()
    parser = argparse.ArgumentParser(
        prog="hexviewport-viewer",
        description="Run the hexviewport pygame viewer.",
    )
    parser.add_argument("--hex-radius", type=float, default=defaults.hex_radius, help="Hex radius in world units.")
    parser.add_argument("--columns", type=int, default=defaults.num_columns, help="Number of map columns.")
    parser.add_argument("--rows", type=int, default=defaults.num_rows, help="Number of map rows.")
    parser.add_argument(
        "--window-radius",
        type=int,
        default=defaults.window_radius,
        help="How many hexes to draw around the current map center.",
    )
    parser.add_argument(
        "--no-wrap-east-west",
        dest="wrap_east_west",
        action="store_false",
        help="Disable east-west position wrapping.",
    )
    parser.add_argument(
        "--wrap-north-south",
        action="store_true",
        help="Enable north-south position wrapping.",
    )
    parser.add_argument(
        "--drag-threshold",
        type=float,
        default=defaults.drag_threshold,
        help="Minimum drag distance in world units before the window recenters.",
    )
    parser.add_argument("--start-column", type=int, default=defaults.start_column)
    parser.add_argument("--start-row", type=int, default=defaults.start_row)
    parser.add_argument("--seed", type=int, default=defaults.seed, help="Terrain assignment seed.")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver for CI/testing and exit without opening a real window.",
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> ViewportConfig:
    return ViewportConfig(
        hex_radius=args.hex_radius,
        num_columns=args.columns,
        num_rows=args.rows,
        window_radius=args.window_radius,
        wrap_east_west=args.wrap_east_west,
        wrap_north_south=args.wrap_north_south,
        drag_threshold=args.drag_threshold,
        start_column=args.start_column,
        start_row=args.start_row,
        seed=args.seed,
    )


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[hexviewport.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )
    for name in ("SDL_VIDEODRIVER", "SDL_VIDEO_WINDOW_POS"):
        value = os.environ.get(name, "<unset>")
        print(f"[hexviewport.viewer] env {name}={value}")


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def run_pygame_viewer(config: ViewportConfig | None = None, *, headless: bool = False) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[hexviewport.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()
    pygame_module = _ensure_pygame_imported()

    try:
        pygame_module.init()
    except Exception as exc:
        print(
            "[hexviewport.viewer] failed during pygame.init(): "
            f"{exc}. Hint: verify a working SDL video driver (set SDL_VIDEODRIVER=dummy for headless mode).",
            file=sys.stderr,
        )
        return 1

    layer = VisibleHexLayer()
    try:
        hex_map = HexMap(config or ViewportConfig(), listener=layer)
    except (ValueError, IndexError) as exc:
        print(f"[hexviewport.viewer] failed to initialize map: {exc}", file=sys.stderr)
        pygame_module.quit()
        return 1

    try:
        pygame_module.display.set_caption("Hexviewport")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            "[hexviewport.viewer] failed during pygame.display.set_mode(...): "
            f"{exc}. Hint: GUI sessions require a valid display; use --headless or HEXVIEWPORT_HEADLESS=1.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    driver_name = pygame_module.display.get_driver()
    print(f"[hexviewport.viewer] display initialized: {driver_name}, window size={WINDOW_SIZE}")

    clock = pygame_module.time.Clock()
    font = pygame_module.font.SysFont("consolas", 18)
    viewport_rect = _viewport_rect()
    screen_center = (float(viewport_rect.centerx), float(viewport_rect.centery))
    map_offset = _initial_map_offset(hex_map)
    status_message: str | None = None

    def draw_frame() -> None:
        screen.fill((17, 18, 25))
        _draw_map(screen, hex_map, layer, map_offset, screen_center, clip_rect=viewport_rect)
        pygame_module.draw.rect(screen, (64, 68, 84), viewport_rect, 1)
        _draw_hud(screen, hex_map, layer, font, status_message)
        pygame_module.display.flip()

    if headless:
        draw_frame()
        pygame_module.quit()
        return 0

    running = True
    while running:
        clock.tick(60)
        for event in pygame_module.event.get():
            if event.type == pygame_module.QUIT:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                running = False
            elif event.type == pygame_module.MOUSEBUTTONDOWN and event.button == 1:
                if not viewport_rect.collidepoint(event.pos):
                    continue
                world = _pixel_to_world(event.pos[0], event.pos[1], screen_center)
                touched = hex_map.cell_under(world - map_offset)
                hex_map.pan.begin_drag(world, touched)
            elif event.type == pygame_module.MOUSEMOTION and hex_map.pan.state == PAN_DRAGGING:
                world = _pixel_to_world(event.pos[0], event.pos[1], screen_center)
                map_offset = map_offset + hex_map.pan.continue_drag(world)
            elif event.type == pygame_module.MOUSEBUTTONUP and event.button == 1 and hex_map.pan.state == PAN_DRAGGING:
                world = _pixel_to_world(event.pos[0], event.pos[1], screen_center)
                outcome = hex_map.pan.end_drag(world)
                if outcome.recentered:
                    status_message = f"recentered to ({outcome.center.q},{outcome.center.r})"
                    print(
                        "[hexviewport.viewer] recentered "
                        f"center=({outcome.center.q},{outcome.center.r}) visible={len(outcome.visible)} "
                        f"drag=({outcome.total_delta.x:.2f},{outcome.total_delta.z:.2f})"
                    )
        draw_frame()

    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    headless = args.headless or _env_flag_enabled("HEXVIEWPORT_HEADLESS")
    try:
        config = _config_from_args(args)
    except (ValueError, IndexError) as exc:
        print(f"[hexviewport.viewer] invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(1)
    raise SystemExit(run_pygame_viewer(config, headless=headless))


if __name__ == "__main__":
    main()
