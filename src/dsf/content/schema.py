from __future__ import annotations

from typing import Any

from dsf.world.adventure import (
    MAP_ELEMENT_NODE,
    MAP_ELEMENT_ROAD,
    NODE_DETAILS_ADVENTURE,
    NODE_DETAILS_LEVEL,
)

SUPPORTED_SCHEMA_VERSIONS = {1}
VALID_ELEMENT_TYPES = {MAP_ELEMENT_ROAD, MAP_ELEMENT_NODE}
VALID_DETAILS_TYPES = {NODE_DETAILS_ADVENTURE, NODE_DETAILS_LEVEL}
ELEMENT_ROW_FIELDS = {"pos", "element"}
ROAD_FIELDS = {"type"}
NODE_FIELDS = {"type", "name", "details"}
DETAILS_FIELDS = {"type", "target"}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_exact_fields(value: dict[str, Any], expected: set[str], *, field_name: str) -> None:
    missing = expected - set(value.keys())
    if missing:
        raise ValueError(f"{field_name} missing fields: {sorted(missing)}")
    unexpected = set(value.keys()) - expected
    if unexpected:
        raise ValueError(f"{field_name} has unexpected fields: {sorted(unexpected)}")


def _validate_pos(pos: Any, *, field_name: str) -> tuple[int, int]:
    if not isinstance(pos, dict):
        raise ValueError(f"{field_name} must be an object")
    _require_exact_fields(pos, {"x", "y"}, field_name=field_name)
    if not _is_int(pos["x"]) or not _is_int(pos["y"]):
        raise ValueError(f"{field_name} x and y must be integers")
    return pos["x"], pos["y"]


def _validate_details(details: Any, *, field_name: str) -> None:
    if not isinstance(details, dict):
        raise ValueError(f"{field_name} must be an object")
    details_type = details.get("type")
    if details_type not in VALID_DETAILS_TYPES:
        raise ValueError(f"{field_name} unsupported type: {details_type!r}")
    _require_exact_fields(details, DETAILS_FIELDS, field_name=field_name)
    target = details["target"]
    if not isinstance(target, str) or not target:
        raise ValueError(f"{field_name}.target must be a non-empty string")


def _validate_element(element: Any, *, field_name: str) -> None:
    if not isinstance(element, dict):
        raise ValueError(f"{field_name} must be an object")
    element_type = element.get("type")
    if element_type not in VALID_ELEMENT_TYPES:
        raise ValueError(f"{field_name} unsupported type: {element_type!r}")
    if element_type == MAP_ELEMENT_ROAD:
        _require_exact_fields(element, ROAD_FIELDS, field_name=field_name)
        return
    _require_exact_fields(element, NODE_FIELDS, field_name=field_name)
    name = element["name"]
    if not isinstance(name, str) or not name:
        raise ValueError(f"{field_name}.name must be a non-empty string")
    _validate_details(element["details"], field_name=f"{field_name}.details")


def validate_adventure_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError("adventure payload must be an object")

    schema_version = payload.get("schema_version")
    if not _is_int(schema_version):
        raise ValueError("adventure must contain integer field: schema_version")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported adventure schema_version: {schema_version}")

    elements = payload.get("elements")
    if not isinstance(elements, list):
        raise ValueError("adventure must contain list field: elements")

    seen: set[tuple[int, int]] = set()
    for index, row in enumerate(elements):
        if not isinstance(row, dict):
            raise ValueError(f"elements[{index}] must be an object")
        _require_exact_fields(row, ELEMENT_ROW_FIELDS, field_name=f"elements[{index}]")
        coord = _validate_pos(row["pos"], field_name=f"elements[{index}].pos")
        if coord in seen:
            raise ValueError(f"elements[{index}] duplicate pos: {coord}")
        seen.add(coord)
        _validate_element(row["element"], field_name=f"elements[{index}].element")
