"""
Dependency Graph Model
======================

Validates a requirement list and indexes its dependency edges.

Dangling dependencies (ids not present in the input) are dropped here, so
nothing downstream ever sees them. Self-dependencies are kept: the solver's
epsilon guard turns them into zero force.

Version: 0.1.0
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from shared.logging import get_logger

from services.requirement_map.schema.nodes import RequirementNode


logger = get_logger(__name__)


class ValidationError(ValueError):
    """Raised when a node list cannot be laid out unambiguously."""

    def __init__(self, duplicate_ids: Sequence[str]) -> None:
        self.duplicate_ids = tuple(duplicate_ids)
        super().__init__(f"Duplicate node ids: {', '.join(self.duplicate_ids)}")


@dataclass(frozen=True)
class DependencyGraph:
    """Validated node ids plus the dependency edges that resolve."""

    node_ids: tuple[str, ...]
    edges: tuple[tuple[str, str], ...]
    dangling: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_nodes(cls, nodes: Sequence[RequirementNode]) -> "DependencyGraph":
        """
        Build the graph for one layout run.

        Args:
            nodes: Requirement records in display order

        Returns:
            DependencyGraph with dangling references removed

        Raises:
            ValidationError: If two nodes share an id
        """
        node_ids = tuple(node.id for node in nodes)

        counts = Counter(node_ids)
        duplicates = [node_id for node_id, count in counts.items() if count > 1]
        if duplicates:
            logger.warning("duplicate_node_ids", duplicate_ids=duplicates)
            raise ValidationError(duplicates)

        known = set(node_ids)
        edges: list[tuple[str, str]] = []
        dangling: list[tuple[str, str]] = []

        for node in nodes:
            for dep_id in node.dependencies:
                if dep_id in known:
                    edges.append((node.id, dep_id))
                else:
                    dangling.append((node.id, dep_id))
                    logger.debug(
                        "dangling_dependency_ignored",
                        node_id=node.id,
                        dependency_id=dep_id,
                    )

        return cls(node_ids=node_ids, edges=tuple(edges), dangling=tuple(dangling))

    def __len__(self) -> int:
        return len(self.node_ids)

    def index_of(self, node_id: str) -> int:
        """Position of a node in the input order."""
        return self.node_ids.index(node_id)

    def resolved_dependencies(self, node_id: str) -> tuple[str, ...]:
        """Dependencies of `node_id` that exist in the graph, in input order."""
        return tuple(dep for src, dep in self.edges if src == node_id)

    def edge_index_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Source and dependency indices of every edge, for vectorized force passes."""
        index = {node_id: i for i, node_id in enumerate(self.node_ids)}
        sources = np.fromiter((index[src] for src, _ in self.edges), dtype=np.intp, count=len(self.edges))
        targets = np.fromiter((index[dep] for _, dep in self.edges), dtype=np.intp, count=len(self.edges))
        return sources, targets
