from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from dsf.content.io import load_adventure_json
from dsf.world.adventure import (
    NODE_DETAILS_ADVENTURE,
    NODE_DETAILS_LEVEL,
    Adventure,
    AdventureDetails,
    AdventureNode,
    LevelDetails,
    Node,
    NodeDetails,
    Road,
)
from dsf.world.location import Pos

TILE_ROAD = "road"
TILE_NODE = "node"


class SceneBuilder(Protocol):
    """Creates one visible, interactable scene element per placed tile."""

    def place_tile(self, pos: Pos, kind: str, tags: dict[str, Any]) -> None:
        ...


def node_tags(node: AdventureNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "details_type": node.details.type_tag,
        "target": node.details.target,
    }


def resolve_node_target(tags: dict[str, Any]) -> NodeDetails:
    """Turn the tags of a placed node tile back into what selecting it opens."""
    details_type = tags.get("details_type")
    if details_type == NODE_DETAILS_ADVENTURE:
        return AdventureDetails(target=tags.get("target"))
    if details_type == NODE_DETAILS_LEVEL:
        return LevelDetails(target=tags.get("target"))
    raise ValueError(f"tile tags do not describe a node target: {tags!r}")


def dispatch_adventure(adventure: Adventure, scene: SceneBuilder) -> int:
    placed = 0
    for pos, element in adventure.sorted_items():
        if isinstance(element, Road):
            scene.place_tile(pos, TILE_ROAD, {})
        elif isinstance(element, Node):
            scene.place_tile(pos, TILE_NODE, node_tags(element.node))
        else:
            raise TypeError(f"unsupported map element: {element!r}")
        placed += 1
    return placed


def load_adventure(path: str | Path, scene: SceneBuilder) -> Adventure:
    """Decode the whole adventure file, then place a tile for every element.

    Decoding errors propagate before the scene is touched.
    """
    adventure = load_adventure_json(path)
    dispatch_adventure(adventure, scene)
    return adventure
