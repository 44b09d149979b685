from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from dsf.cli.viewer import AsciiSceneBuilder
from dsf.content.paths import default_adventure_path, get_levels_dir
from dsf.world.generator import create_default_adventure
from dsf.world.loader import dispatch_adventure


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dsf-new-default-adventure",
        description=(
            "Build the default adventure: one node per loadable level in the levels "
            "directory, laid out on a single row and joined by roads."
        ),
    )
    parser.add_argument("--levels-dir", help="Directory holding level JSON files (default: assets/world/levels)")
    parser.add_argument("--output", help="Output adventure path (default: assets/world/adventures/default.json)")
    parser.add_argument("--print-layout", action="store_true", help="Print an ASCII rendering of the result")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        levels_dir = Path(args.levels_dir) if args.levels_dir else get_levels_dir()
        output_path = Path(args.output) if args.output else default_adventure_path()
        adventure = create_default_adventure(levels_dir=levels_dir, output_path=output_path)

        if args.print_layout:
            scene = AsciiSceneBuilder()
            dispatch_adventure(adventure, scene)
            print(scene.render())

        print(
            "ok "
            f"path={output_path} "
            f"nodes={len(adventure.nodes())} "
            f"roads={len(adventure.roads())}"
        )
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
