from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from dsf.content.schema import validate_adventure_payload
from dsf.world.adventure import Adventure, Node, Road, map_element_from_dict
from dsf.world.location import Pos

SCHEMA_VERSION = 1
CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")


class AdventureFileError(Exception):
    """Reading or writing an adventure file failed."""


class AdventureIOError(AdventureFileError):
    """The file could not be opened, read or written."""


class AdventureFormatError(AdventureFileError, ValueError):
    """The file content does not match the adventure schema."""


def _element_to_dict(element: Road | Node) -> dict[str, Any]:
    if isinstance(element, (Road, Node)):
        return element.to_dict()
    raise TypeError(f"unsupported map element: {element!r}")


def adventure_to_payload(adventure: Adventure) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "elements": [
            {"pos": pos.to_dict(), "element": _element_to_dict(element)}
            for pos, element in adventure.sorted_items()
        ],
    }


def adventure_from_payload(payload: Any) -> Adventure:
    try:
        validate_adventure_payload(payload)
        adventure = Adventure()
        for row in payload["elements"]:
            adventure.insert(Pos.from_dict(row["pos"]), map_element_from_dict(row["element"]))
    except (ValueError, RecursionError) as exc:
        raise AdventureFormatError(str(exc)) from exc
    return adventure


def _canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = _canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def save_adventure_json(path: str | Path, adventure: Adventure) -> None:
    payload = adventure_to_payload(adventure)
    validate_adventure_payload(payload)
    try:
        _write_atomic_json(path, payload)
    except OSError as exc:
        raise AdventureIOError(f"failed to write adventure file {path}: {exc}") from exc


def load_adventure_json(path: str | Path) -> Adventure:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise AdventureIOError(f"failed to read adventure file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise AdventureFormatError(f"adventure file {path} is not valid UTF-8: {exc}") from exc
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise AdventureFormatError(f"adventure file {path} is not valid JSON: {exc}") from exc
    return adventure_from_payload(payload)
