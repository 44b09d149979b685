from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dsf.content.paths import level_path


@dataclass(frozen=True)
class Level:
    """Loaded level resource. The payload is opaque to the adventure layer."""

    name: str
    payload: dict[str, Any]


def validate_level_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError("level payload must be an object")
    for key in payload:
        if not isinstance(key, str):
            raise ValueError("level payload keys must be strings")


def load_level_json(path: str | Path) -> Level:
    level_file = Path(path)
    try:
        payload = json.loads(level_file.read_text(encoding="utf-8"))
    except RecursionError as exc:
        raise ValueError(f"level file {level_file} is nested too deeply") from exc
    validate_level_payload(payload)
    return Level(name=level_file.stem, payload=payload)


def load_level(name: str) -> Level:
    return load_level_json(level_path(name))


def list_level_files(levels_dir: str | Path) -> list[str]:
    """File names of every regular file directly inside ``levels_dir``, sorted.

    Raises OSError when the directory itself cannot be read. Entries that
    are not regular files, or that vanish or fail to stat while listing,
    are skipped.
    """
    names: list[str] = []
    with os.scandir(levels_dir) as entries:
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            names.append(entry.name)
    return sorted(names)
