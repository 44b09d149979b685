from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Union

from dsf.world.location import Pos

MAP_ELEMENT_ROAD = "Road"
MAP_ELEMENT_NODE = "Node"
NODE_DETAILS_ADVENTURE = "Adventure"
NODE_DETAILS_LEVEL = "Level"
ROAD_LINK_ID_MAX = 0xFFFF


def _require_non_empty_str(value: Any, *, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


@dataclass(frozen=True)
class AdventureDetails:
    """Node opens a nested adventure: a collection of levels."""

    type_tag: ClassVar[str] = NODE_DETAILS_ADVENTURE

    target: str

    def __post_init__(self) -> None:
        _require_non_empty_str(self.target, field_name="details.target")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_tag, "target": self.target}


@dataclass(frozen=True)
class LevelDetails:
    """Node opens a single level directly."""

    type_tag: ClassVar[str] = NODE_DETAILS_LEVEL

    target: str

    def __post_init__(self) -> None:
        _require_non_empty_str(self.target, field_name="details.target")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_tag, "target": self.target}


NodeDetails = Union[AdventureDetails, LevelDetails]


def node_details_from_dict(data: dict[str, Any]) -> NodeDetails:
    if not isinstance(data, dict):
        raise ValueError("details must be an object")
    type_tag = data.get("type")
    if type_tag == NODE_DETAILS_ADVENTURE:
        return AdventureDetails(target=data.get("target"))
    if type_tag == NODE_DETAILS_LEVEL:
        return LevelDetails(target=data.get("target"))
    raise ValueError(f"unsupported details type: {type_tag!r}")


@dataclass(frozen=True)
class AdventureNode:
    name: str
    details: NodeDetails

    def __post_init__(self) -> None:
        _require_non_empty_str(self.name, field_name="node.name")
        if not isinstance(self.details, (AdventureDetails, LevelDetails)):
            raise TypeError(f"unsupported node details: {self.details!r}")


@dataclass(frozen=True)
class Road:
    """Connective tile between nodes. Carries no data."""

    type_tag: ClassVar[str] = MAP_ELEMENT_ROAD

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_tag}


@dataclass(frozen=True)
class Node:
    type_tag: ClassVar[str] = MAP_ELEMENT_NODE

    node: AdventureNode

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def details(self) -> NodeDetails:
        return self.node.details

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_tag,
            "name": self.node.name,
            "details": self.node.details.to_dict(),
        }


MapElement = Union[Road, Node]


def map_element_from_dict(data: dict[str, Any]) -> MapElement:
    if not isinstance(data, dict):
        raise ValueError("element must be an object")
    type_tag = data.get("type")
    if type_tag == MAP_ELEMENT_ROAD:
        return Road()
    if type_tag == MAP_ELEMENT_NODE:
        if "details" not in data:
            raise ValueError("node element missing details")
        return Node(
            AdventureNode(
                name=_require_non_empty_str(data.get("name"), field_name="node.name"),
                details=node_details_from_dict(data["details"]),
            )
        )
    raise ValueError(f"unsupported element type: {type_tag!r}")


def level_node(name: str) -> Node:
    return Node(AdventureNode(name=name, details=LevelDetails(target=name)))


def adventure_node(name: str, adventure: str | None = None) -> Node:
    return Node(AdventureNode(name=name, details=AdventureDetails(target=adventure or name)))


@dataclass
class Adventure:
    """Sparse map of grid positions to map elements.

    Equality compares the set of (position, element) pairs, so insertion
    order never matters. No connectivity is enforced here; the generator
    guarantees it for its own output only.
    """

    elements: dict[Pos, MapElement] = field(default_factory=dict)

    def insert(self, pos: Pos, element: MapElement) -> None:
        if not isinstance(pos, Pos):
            raise TypeError(f"adventure keys must be Pos, got {pos!r}")
        if not isinstance(element, (Road, Node)):
            raise TypeError(f"unsupported map element: {element!r}")
        self.elements[pos] = element

    def get(self, pos: Pos) -> MapElement | None:
        return self.elements.get(pos)

    def items(self) -> Iterator[tuple[Pos, MapElement]]:
        return iter(self.elements.items())

    def sorted_items(self) -> list[tuple[Pos, MapElement]]:
        return sorted(self.elements.items(), key=lambda item: item[0])

    def nodes(self) -> list[tuple[Pos, AdventureNode]]:
        return [(pos, element.node) for pos, element in self.sorted_items() if isinstance(element, Node)]

    def roads(self) -> list[Pos]:
        return [pos for pos, element in self.sorted_items() if isinstance(element, Road)]

    def __len__(self) -> int:
        return len(self.elements)

    def __contains__(self, pos: object) -> bool:
        return pos in self.elements


@dataclass(frozen=True)
class RoadLink:
    """Connection between two node ids rather than a grid tile.

    Not produced or consumed anywhere yet; the generator and loader only
    work with grid positioned ``Road`` tiles.
    """

    start_id: int = 0
    end_id: int = 0

    def __post_init__(self) -> None:
        for field_name, value in (("start_id", self.start_id), ("end_id", self.end_id)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"road_link.{field_name} must be an integer")
            if value < 0 or value > ROAD_LINK_ID_MAX:
                raise ValueError(f"road_link.{field_name} must be within [0, {ROAD_LINK_ID_MAX}]")
