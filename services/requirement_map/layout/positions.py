"""
Position Map & Cache
====================

Output contract of the layout engine.

`PositionMap` is the immutable id -> (x, y, z) mapping handed to renderers.
`PositionCache` recomputes it only when the caller passes a different node
list object than last time.

Version: 0.1.0
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from services.requirement_map.schema.nodes import Position, RequirementNode


if TYPE_CHECKING:
    from services.requirement_map.layout.solver import ForceLayoutSolver


class PositionMap(Mapping[str, Position]):
    """Read-only node positions plus the edges a renderer should draw."""

    __slots__ = ("_positions", "_edges")

    def __init__(
        self,
        positions: Mapping[str, Position],
        edges: Sequence[tuple[str, str]] = (),
    ) -> None:
        self._positions: dict[str, Position] = dict(positions)
        self._edges: tuple[tuple[str, str], ...] = tuple(edges)

    @classmethod
    def empty(cls) -> "PositionMap":
        return cls({})

    @classmethod
    def from_array(
        cls,
        node_ids: Sequence[str],
        buffer: np.ndarray,
        edges: Sequence[tuple[str, str]] = (),
    ) -> "PositionMap":
        """Freeze a solver buffer of shape (n, 3) into plain float tuples."""
        positions = {
            node_id: (float(row[0]), float(row[1]), float(row[2]))
            for node_id, row in zip(node_ids, buffer, strict=True)
        }
        return cls(positions, edges)

    def __getitem__(self, node_id: str) -> Position:
        return self._positions[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"PositionMap({len(self)} nodes, {len(self._edges)} edges)"

    @property
    def edges(self) -> tuple[tuple[str, str], ...]:
        """Valid (node_id, dependency_id) pairs in input order."""
        return self._edges

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "positions": {node_id: list(pos) for node_id, pos in self._positions.items()},
            "edges": [list(edge) for edge in self._edges],
        }


class PositionCache:
    """
    Holds the latest layout for one consumer.

    Recomputes when `positions` receives a node list that is not the same
    object as the previous call. Equal-but-distinct lists also recompute;
    deduplicating by value is the caller's job. Not thread-safe.
    """

    def __init__(self, solver: "ForceLayoutSolver | None" = None) -> None:
        if solver is None:
            from services.requirement_map.layout.solver import ForceLayoutSolver

            solver = ForceLayoutSolver()
        self.solver = solver
        self._nodes: Sequence[RequirementNode] | None = None
        self._result: PositionMap | None = None
        self.recompute_count = 0

    def positions(self, nodes: Sequence[RequirementNode]) -> PositionMap:
        """
        Get positions for `nodes`, recomputing if the list changed.

        Raises:
            ValidationError: If node ids are not unique; the cache is left empty
        """
        if self._result is not None and nodes is self._nodes:
            return self._result

        self.invalidate()
        result = self.solver.solve(nodes)
        self._nodes = nodes
        self._result = result
        self.recompute_count += 1
        return result

    def invalidate(self) -> None:
        """Drop the cached layout."""
        self._nodes = None
        self._result = None
