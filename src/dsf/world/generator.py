from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from dsf.content.io import AdventureIOError, save_adventure_json
from dsf.content.levels import list_level_files, load_level_json
from dsf.content.paths import default_adventure_path, get_levels_dir
from dsf.world.adventure import Adventure, Road, level_node
from dsf.world.location import Pos

logger = logging.getLogger(__name__)

NODE_STRIDE = 2
LAYOUT_ROW = 0

LevelLoader = Callable[[Path], Any]


def build_linear_adventure(level_names: Iterable[str]) -> Adventure:
    """Lay out level nodes on one row, with a road between each neighbour pair.

    Nodes take the even x coordinates and roads the odd ones, so the two
    never collide.
    """
    adventure = Adventure()
    for index, name in enumerate(level_names):
        adventure.insert(Pos(index * NODE_STRIDE, LAYOUT_ROW), level_node(name))
        if index > 0:
            adventure.insert(Pos(index * NODE_STRIDE - 1, LAYOUT_ROW), Road())
    return adventure


def _loadable_level_names(levels_dir: Path, level_loader: LevelLoader) -> list[str]:
    try:
        file_names = list_level_files(levels_dir)
    except OSError as exc:
        raise AdventureIOError(f"failed to read contents of the levels directory {levels_dir}: {exc}") from exc

    names: list[str] = []
    for file_name in file_names:
        level_file = levels_dir / file_name
        try:
            level_loader(level_file)
        except Exception as exc:
            logger.warning("Failed to load level %s: %s", level_file, exc)
            continue
        names.append(Path(file_name).stem)
    return names


def create_default_adventure(
    *,
    levels_dir: str | Path | None = None,
    output_path: str | Path | None = None,
    level_loader: LevelLoader = load_level_json,
) -> Adventure:
    """Create and write an adventure that gives access to every single level.

    Levels that fail to load are logged and left out. An unreadable levels
    directory or a failed write raises ``AdventureIOError``.
    """
    source_dir = Path(levels_dir) if levels_dir is not None else get_levels_dir()
    destination = Path(output_path) if output_path is not None else default_adventure_path()

    adventure = build_linear_adventure(_loadable_level_names(source_dir, level_loader))
    try:
        save_adventure_json(destination, adventure)
    except AdventureIOError as exc:
        raise AdventureIOError(f"failed to create default adventure that contains all levels: {exc}") from exc
    logger.info("Wrote default adventure %s with %d elements", destination, len(adventure))
    return adventure
