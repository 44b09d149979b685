from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _require_int(value: Any, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


@dataclass(frozen=True, order=True)
class Pos:
    """Square grid coordinate (x, y). Unbounded, may be negative."""

    x: int
    y: int

    def __post_init__(self) -> None:
        _require_int(self.x, field_name="pos.x")
        _require_int(self.y, field_name="pos.y")

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pos":
        if not isinstance(data, dict) or not {"x", "y"} <= data.keys():
            raise ValueError("pos requires x and y")
        return cls(
            x=_require_int(data["x"], field_name="pos.x"),
            y=_require_int(data["y"], field_name="pos.y"),
        )
