"""
Requirement Map Presentation
============================

Turns a solved layout into what a 3D renderer draws: sized node markers and
connection segments, with optional selection highlighting.

Selection and hover are view state. Nothing here feeds back into the solver.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from services.requirement_map.schema.nodes import Importance, Position, RequirementNode


NODE_SIZES: dict[Importance, float] = {
    Importance.HIGH: 1.0,
    Importance.MEDIUM: 0.8,
    Importance.LOW: 0.6,
}
DEFAULT_NODE_SIZE = 0.7


@dataclass(frozen=True)
class SceneNode:
    """A node marker."""

    id: str
    name: str
    position: Position
    size: float
    importance: Importance
    category: str | None = None
    completed: bool | None = None
    selected: bool = False


@dataclass(frozen=True)
class SceneSegment:
    """A dependency line from a node to one of its dependencies."""

    source_id: str
    target_id: str
    start: Position
    end: Position
    highlighted: bool = False


@dataclass
class SceneView:
    """Everything a renderer needs for one frame of the map."""

    nodes: list[SceneNode] = field(default_factory=list)
    segments: list[SceneSegment] = field(default_factory=list)
    selected_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.nodes


def node_size(importance: Importance | str | None) -> float:
    """Marker radius scale for an importance level."""
    try:
        return NODE_SIZES[Importance(importance)]
    except ValueError:
        return DEFAULT_NODE_SIZE


def build_scene(
    nodes: Sequence[RequirementNode],
    positions: Mapping[str, Position],
    selected_id: str | None = None,
) -> SceneView:
    """
    Build the renderable view of a laid-out requirement map.

    Args:
        nodes: The records that were laid out
        positions: Solver output keyed by node id
        selected_id: Node the user clicked, if any

    Returns:
        SceneView with markers for positioned nodes and segments for every
        dependency whose endpoints are both positioned. With a selection,
        only segments of the selected node and of nodes depending on it are
        kept, and those touching the selection are highlighted.
    """
    view = SceneView(selected_id=selected_id)

    for node in nodes:
        position = positions.get(node.id)
        if position is None:
            continue
        view.nodes.append(
            SceneNode(
                id=node.id,
                name=node.name,
                position=position,
                size=node_size(node.importance),
                importance=node.importance,
                category=node.category,
                completed=node.completed,
                selected=node.id == selected_id,
            )
        )

    for node in nodes:
        start = positions.get(node.id)
        if start is None:
            continue

        if selected_id is not None and not (
            node.id == selected_id or selected_id in node.dependencies
        ):
            continue

        for dep_id in node.dependencies:
            end = positions.get(dep_id)
            if end is None:
                continue
            view.segments.append(
                SceneSegment(
                    source_id=node.id,
                    target_id=dep_id,
                    start=start,
                    end=end,
                    highlighted=selected_id is not None
                    and selected_id in (node.id, dep_id),
                )
            )

    return view
