import json
from pathlib import Path

import pytest

from dsf.content.io import (
    AdventureFileError,
    AdventureFormatError,
    AdventureIOError,
    adventure_from_payload,
    adventure_to_payload,
    load_adventure_json,
    save_adventure_json,
)
from dsf.world.adventure import Adventure, Road, adventure_node, level_node
from dsf.world.location import Pos


def _sample_adventure() -> Adventure:
    adventure = Adventure()
    adventure.insert(Pos(0, 0), level_node("intro"))
    adventure.insert(Pos(1, 0), Road())
    adventure.insert(Pos(2, 0), adventure_node("caves", "cave_world"))
    adventure.insert(Pos(2, -1), Road())
    adventure.insert(Pos(-4, 9), level_node("secret"))
    return adventure


def _write_payload(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_save_then_load_round_trip_preserves_entries(tmp_path: Path) -> None:
    adventure = _sample_adventure()
    out_path = tmp_path / "adventures" / "sample.json"

    save_adventure_json(out_path, adventure)
    loaded = load_adventure_json(out_path)

    assert loaded == adventure
    assert set(loaded.items()) == set(adventure.items())


def test_empty_adventure_round_trips(tmp_path: Path) -> None:
    out_path = tmp_path / "empty.json"

    save_adventure_json(out_path, Adventure())
    payload = json.loads(out_path.read_text(encoding="utf-8"))

    assert payload == {"schema_version": 1, "elements": []}
    assert load_adventure_json(out_path) == Adventure()


def test_saved_payload_uses_variant_tags_and_sorted_positions() -> None:
    payload = adventure_to_payload(_sample_adventure())

    assert payload["schema_version"] == 1
    assert [row["pos"] for row in payload["elements"]] == [
        {"x": -4, "y": 9},
        {"x": 0, "y": 0},
        {"x": 1, "y": 0},
        {"x": 2, "y": -1},
        {"x": 2, "y": 0},
    ]
    assert payload["elements"][2]["element"] == {"type": "Road"}
    assert payload["elements"][4]["element"] == {
        "type": "Node",
        "name": "caves",
        "details": {"type": "Adventure", "target": "cave_world"},
    }


def test_canonical_json_stable_across_save_load_cycles(tmp_path: Path) -> None:
    first_path = tmp_path / "first.json"
    second_path = tmp_path / "second.json"

    save_adventure_json(first_path, _sample_adventure())
    save_adventure_json(second_path, load_adventure_json(first_path))

    assert first_path.read_text(encoding="utf-8") == second_path.read_text(encoding="utf-8")


def test_save_overwrites_existing_file(tmp_path: Path) -> None:
    out_path = tmp_path / "default.json"
    out_path.write_text("stale", encoding="utf-8")

    save_adventure_json(out_path, _sample_adventure())

    assert load_adventure_json(out_path) == _sample_adventure()
    assert [path.name for path in tmp_path.iterdir()] == ["default.json"]


def test_missing_file_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(AdventureIOError, match="failed to read adventure file"):
        load_adventure_json(tmp_path / "missing.json")


def test_unwritable_destination_is_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(AdventureIOError, match="failed to write adventure file"):
        save_adventure_json(blocker / "default.json", _sample_adventure())


def test_invalid_json_is_format_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(AdventureFormatError, match="not valid JSON"):
        load_adventure_json(path)


def test_unknown_element_tag_is_format_error(tmp_path: Path) -> None:
    path = _write_payload(
        tmp_path / "bridge.json",
        {"schema_version": 1, "elements": [{"pos": {"x": 0, "y": 0}, "element": {"type": "Bridge"}}]},
    )

    with pytest.raises(AdventureFormatError, match="unsupported type: 'Bridge'"):
        load_adventure_json(path)


def test_format_errors_are_value_errors_but_not_io_errors(tmp_path: Path) -> None:
    path = _write_payload(tmp_path / "list.json", [])

    with pytest.raises(ValueError) as excinfo:
        load_adventure_json(path)

    assert isinstance(excinfo.value, AdventureFileError)
    assert not isinstance(excinfo.value, AdventureIOError)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"elements": []}, "integer field: schema_version"),
        ({"schema_version": 2, "elements": []}, "unsupported adventure schema_version: 2"),
        ({"schema_version": 1}, "list field: elements"),
        ({"schema_version": 1, "elements": [{"pos": {"x": 0, "y": 0}}]}, r"missing fields: \['element'\]"),
        (
            {"schema_version": 1, "elements": [{"pos": {"x": "0", "y": 0}, "element": {"type": "Road"}}]},
            "x and y must be integers",
        ),
        (
            {
                "schema_version": 1,
                "elements": [
                    {"pos": {"x": 0, "y": 0}, "element": {"type": "Road"}},
                    {"pos": {"x": 0, "y": 0}, "element": {"type": "Road"}},
                ],
            },
            "duplicate pos",
        ),
        (
            {"schema_version": 1, "elements": [{"pos": {"x": 0, "y": 0}, "element": {"type": "Node", "name": "a"}}]},
            r"missing fields: \['details'\]",
        ),
        (
            {
                "schema_version": 1,
                "elements": [
                    {
                        "pos": {"x": 0, "y": 0},
                        "element": {"type": "Node", "name": "a", "details": {"type": "Shop", "target": "a"}},
                    }
                ],
            },
            "details unsupported type: 'Shop'",
        ),
        (
            {
                "schema_version": 1,
                "elements": [
                    {
                        "pos": {"x": 0, "y": 0},
                        "element": {"type": "Node", "name": "", "details": {"type": "Level", "target": "a"}},
                    }
                ],
            },
            "name must be a non-empty string",
        ),
        (
            {"schema_version": 1, "elements": [{"pos": {"x": 0, "y": 0}, "element": {"type": "Road", "name": "x"}}]},
            "unexpected fields",
        ),
    ],
)
def test_schema_violations_are_format_errors(payload: dict, message: str) -> None:
    with pytest.raises(AdventureFormatError, match=message):
        adventure_from_payload(payload)


def test_deeply_nested_json_is_format_error(tmp_path: Path) -> None:
    path = tmp_path / "deep.json"
    path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

    with pytest.raises(AdventureFormatError, match="not valid JSON"):
        load_adventure_json(path)
