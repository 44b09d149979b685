from __future__ import annotations

import argparse
from typing import Any, Sequence

from dsf.world.loader import TILE_NODE, TILE_ROAD, load_adventure
from dsf.world.location import Pos

TILE_GLYPHS = {TILE_NODE: "N", TILE_ROAD: "="}
EMPTY_GLYPH = "."
MAX_GRID_CELLS = 10_000


class AsciiSceneBuilder:
    """Read-only text projection of placed adventure tiles."""

    def __init__(self) -> None:
        self.tiles: dict[Pos, tuple[str, dict[str, Any]]] = {}

    def place_tile(self, pos: Pos, kind: str, tags: dict[str, Any]) -> None:
        if kind not in TILE_GLYPHS:
            raise ValueError(f"unsupported tile kind: {kind}")
        self.tiles[pos] = (kind, dict(tags))

    def render(self) -> str:
        if not self.tiles:
            return "<empty adventure>"

        min_x = min(pos.x for pos in self.tiles)
        max_x = max(pos.x for pos in self.tiles)
        min_y = min(pos.y for pos in self.tiles)
        max_y = max(pos.y for pos in self.tiles)

        width = max_x - min_x + 1
        height = max_y - min_y + 1

        lines: list[str] = []
        if width * height > MAX_GRID_CELLS:
            lines.append(
                f"<grid omitted: span {width}x{height} exceeds {MAX_GRID_CELLS} cells> "
                f"tiles={len(self.tiles)}"
            )
        else:
            # Highest y first so the grid reads with y pointing up.
            for y in range(max_y, min_y - 1, -1):
                row = []
                for x in range(min_x, max_x + 1):
                    tile = self.tiles.get(Pos(x, y))
                    row.append(TILE_GLYPHS[tile[0]] if tile is not None else EMPTY_GLYPH)
                lines.append(f"y={y:>3}: " + "".join(row))

        for pos in sorted(self.tiles):
            kind, tags = self.tiles[pos]
            if kind == TILE_NODE:
                lines.append(f"node ({pos.x},{pos.y}) name={tags['name']} {tags['details_type']}={tags['target']}")
        return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dsf-view-adventure",
        description="Print an ASCII rendering of an adventure file.",
    )
    parser.add_argument("adventure_path", help="Path to adventure JSON")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    scene = AsciiSceneBuilder()
    try:
        load_adventure(args.adventure_path, scene)
    except Exception as exc:
        print(f"error: {exc}")
        return 1
    print(scene.render())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
