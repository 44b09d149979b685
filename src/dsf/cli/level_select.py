from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from dsf.content.io import AdventureFileError
from dsf.content.levels import Level, load_level
from dsf.content.paths import adventure_path, default_adventure_path, get_user_cache_file
from dsf.world.adventure import AdventureDetails, LevelDetails, NodeDetails
from dsf.world.loader import TILE_NODE, TILE_ROAD, load_adventure, resolve_node_target
from dsf.world.location import Pos

TILE_SIZE = 48
WINDOW_SIZE = (960, 540)
VIEWPORT_MARGIN = 24
DEFAULT_ORIGIN = (VIEWPORT_MARGIN + TILE_SIZE, WINDOW_SIZE[1] // 2)
BACKGROUND_COLOR = (22, 24, 32)
ROAD_COLOR = (153, 126, 90)
LEVEL_NODE_COLOR = (132, 168, 94)
ADVENTURE_NODE_COLOR = (80, 160, 255)
OUTLINE_COLOR = (14, 24, 30)
LABEL_COLOR = (230, 230, 235)
TARGET_FPS = 30

pygame: Any | None = None


@dataclass(frozen=True)
class TileSprite:
    pos: Pos
    kind: str
    tags: dict[str, Any]
    rect: tuple[int, int, int, int]

    def contains(self, pixel_x: int, pixel_y: int) -> bool:
        left, top, width, height = self.rect
        return left <= pixel_x < left + width and top <= pixel_y < top + height


def _tile_rect(pos: Pos, origin: tuple[int, int]) -> tuple[int, int, int, int]:
    # Screen y grows downwards, adventure y grows upwards.
    return (origin[0] + pos.x * TILE_SIZE, origin[1] - pos.y * TILE_SIZE, TILE_SIZE, TILE_SIZE)


class PygameSceneBuilder:
    """Collects placed tiles as sprites; drawing needs pygame, placement does not."""

    def __init__(self, origin: tuple[int, int] = DEFAULT_ORIGIN) -> None:
        self.origin = origin
        self.sprites: list[TileSprite] = []

    def place_tile(self, pos: Pos, kind: str, tags: dict[str, Any]) -> None:
        if kind not in {TILE_NODE, TILE_ROAD}:
            raise ValueError(f"unsupported tile kind: {kind}")
        self.sprites.append(TileSprite(pos=pos, kind=kind, tags=dict(tags), rect=_tile_rect(pos, self.origin)))

    def find_tile_at_pixel(self, pixel_x: int, pixel_y: int) -> TileSprite | None:
        for sprite in self.sprites:
            if sprite.contains(pixel_x, pixel_y):
                return sprite
        return None

    def draw(self, screen: Any, font: Any) -> None:
        pygame_module = _ensure_pygame_imported()
        for sprite in self.sprites:
            rect = pygame_module.Rect(*sprite.rect)
            if sprite.kind == TILE_ROAD:
                road_rect = rect.inflate(0, -TILE_SIZE * 2 // 3)
                pygame_module.draw.rect(screen, ROAD_COLOR, road_rect)
                continue
            color = ADVENTURE_NODE_COLOR if sprite.tags.get("details_type") == AdventureDetails.type_tag else LEVEL_NODE_COLOR
            radius = TILE_SIZE // 2 - 4
            pygame_module.draw.circle(screen, color, rect.center, radius)
            pygame_module.draw.circle(screen, OUTLINE_COLOR, rect.center, radius, 2)
            label = font.render(str(sprite.tags.get("name", "")), True, LABEL_COLOR)
            screen.blit(label, (rect.centerx - label.get_width() // 2, rect.bottom + 2))


@dataclass
class LevelSelectSession:
    """Stack of open adventures; selecting nodes pushes or resolves them."""

    stack: list[tuple[Path, PygameSceneBuilder]] = field(default_factory=list)

    def push(self, path: str | Path) -> PygameSceneBuilder:
        scene = PygameSceneBuilder()
        load_adventure(path, scene)
        self.stack.append((Path(path), scene))
        return scene

    def pop(self) -> bool:
        """Close the current adventure. Returns False once nothing is left open."""
        if self.stack:
            self.stack.pop()
        return bool(self.stack)

    @property
    def current(self) -> PygameSceneBuilder | None:
        return self.stack[-1][1] if self.stack else None

    @property
    def current_path(self) -> Path | None:
        return self.stack[-1][0] if self.stack else None

    def select_at_pixel(self, pixel_x: int, pixel_y: int) -> NodeDetails | None:
        scene = self.current
        if scene is None:
            return None
        sprite = scene.find_tile_at_pixel(pixel_x, pixel_y)
        if sprite is None or sprite.kind != TILE_NODE:
            return None
        return resolve_node_target(sprite.tags)

    def handle_click(self, pixel_x: int, pixel_y: int) -> str | None:
        """Returns the level to open, or None. Adventure nodes are pushed."""
        target = self.select_at_pixel(pixel_x, pixel_y)
        if isinstance(target, LevelDetails):
            return target.target
        if isinstance(target, AdventureDetails):
            self.push(adventure_path(target.target))
            return None
        if target is None:
            return None
        raise TypeError(f"unsupported node details: {target!r}")


def _record_selection(level_name: str, source: Path | None) -> None:
    cache_file = get_user_cache_file()
    cache: dict[str, Any] = {}
    if cache_file.exists():
        try:
            loaded = json.loads(cache_file.read_text(encoding="utf-8"))
        except ValueError:
            loaded = {}
        if isinstance(loaded, dict):
            cache = loaded
    cache["last_level"] = level_name
    cache["last_adventure"] = str(source) if source is not None else None
    cache_file.write_text(json.dumps(cache, indent=2, sort_keys=True), encoding="utf-8")


def _open_level(level_name: str, source: Path | None) -> Level:
    """Load the chosen level and remember it as the last selection."""
    level = load_level(level_name)
    _record_selection(level_name, source)
    return level


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dsf-level-select", description="Browse an adventure and pick a level.")
    parser.add_argument("--adventure", help="Adventure JSON to open (default: assets/world/adventures/default.json)")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver, draw one frame and exit without opening a real window.",
    )
    return parser


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def run_level_select(adventure: str | Path | None = None, *, headless: bool = False) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[dsf.level_select] warning: headless mode active; no window will open.")

    start_path = Path(adventure) if adventure is not None else default_adventure_path()
    session = LevelSelectSession()
    try:
        session.push(start_path)
    except AdventureFileError as exc:
        print(f"[dsf.level_select] failed to load adventure path={start_path}: {exc}", file=sys.stderr)
        return 1

    pygame_module = _ensure_pygame_imported()
    try:
        pygame_module.init()
        pygame_module.display.set_caption("Level select")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            "[dsf.level_select] failed to initialize display: "
            f"{exc}. Hint: set SDL_VIDEODRIVER=dummy or use --headless without a display.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    font = pygame_module.font.Font(None, 18)
    clock = pygame_module.time.Clock()
    print(f"[dsf.level_select] loaded path={start_path} tiles={len(session.current.sprites)}")

    def draw_frame() -> None:
        screen.fill(BACKGROUND_COLOR)
        session.current.draw(screen, font)
        pygame_module.display.flip()

    if headless:
        draw_frame()
        pygame_module.quit()
        return 0

    try:
        while True:
            for event in pygame_module.event.get():
                if event.type == pygame_module.QUIT:
                    return 0
                if event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                    if not session.pop():
                        return 0
                if event.type == pygame_module.MOUSEBUTTONDOWN and event.button == 1:
                    try:
                        level_name = session.handle_click(*event.pos)
                    except AdventureFileError as exc:
                        print(f"[dsf.level_select] failed to open nested adventure: {exc}", file=sys.stderr)
                        continue
                    if level_name is None:
                        continue
                    try:
                        level = _open_level(level_name, session.current_path)
                    except (OSError, ValueError) as exc:
                        print(f"[dsf.level_select] failed to load level={level_name}: {exc}", file=sys.stderr)
                        continue
                    print(f"[dsf.level_select] open level={level.name}")
                    return 0
            draw_frame()
            clock.tick(TARGET_FPS)
    finally:
        pygame_module.quit()


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    return run_level_select(args.adventure, headless=args.headless)


if __name__ == "__main__":
    raise SystemExit(main())
