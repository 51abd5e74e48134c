"""
Force Layout Solver
===================

Positions requirement nodes in 3D with a spring-electric relaxation.

Algorithm:
1. Seed every node on a circle of `initial_radius` in the XZ plane, with a
   sin(2θ) wave in Y so no two nodes start coplanar-degenerate.
2. For a fixed number of iterations, compute forces from the positions at
   the start of the iteration:
   - inverse-square repulsion between every pair closer than the cutoff
   - zero-rest-length Hookean attraction along every dependency edge,
     applied to both endpoints
3. Scale the net force by a damping factor decaying linearly from 0.1
   toward 0 and add it to the position (explicit Euler, no velocity).

There is no convergence check; the iteration count alone bounds the run.

Version: 0.1.0
"""

import asyncio
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from shared.config import LayoutSettings
from shared.logging import get_logger

from services.requirement_map.layout.graph import DependencyGraph
from services.requirement_map.layout.positions import PositionMap
from services.requirement_map.schema.nodes import RequirementNode


logger = get_logger(__name__)

BASE_DAMPING = 0.1


@dataclass(frozen=True)
class LayoutParameters:
    """Constants of one layout run."""

    initial_radius: float = 8.0
    height_factor: float = 0.2
    iterations: int = 50
    spring_constant: float = 0.05
    repulsion_cutoff_factor: float = 2.0
    attraction_epsilon: float = 0.1
    repulsion_epsilon: float = 1e-9

    def __post_init__(self) -> None:
        if not self.initial_radius > 0:
            raise ValueError("initial_radius must be positive")
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0")
        # Coincident nodes have no repulsion direction; they must be skipped
        if not self.repulsion_epsilon > 0:
            raise ValueError("repulsion_epsilon must be positive")
        for name in (
            "spring_constant",
            "repulsion_cutoff_factor",
            "attraction_epsilon",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def repulsion_cutoff(self) -> float:
        """Distance beyond which pairs do not repel."""
        return self.repulsion_cutoff_factor * self.initial_radius

    @classmethod
    def from_settings(cls, layout: LayoutSettings) -> "LayoutParameters":
        """Build parameters from the `LAYOUT_*` configuration section."""
        return cls(
            initial_radius=layout.initial_radius,
            height_factor=layout.height_factor,
            iterations=layout.iterations,
            spring_constant=layout.spring_constant,
            repulsion_cutoff_factor=layout.repulsion_cutoff_factor,
            attraction_epsilon=layout.attraction_epsilon,
        )


def initial_positions(count: int, radius: float, height_factor: float) -> np.ndarray:
    """
    Circular seed layout.

    Args:
        count: Number of nodes
        radius: Circle radius in the XZ plane
        height_factor: Amplitude of the Y wave, relative to the radius

    Returns:
        Array of shape (count, 3)
    """
    buffer = np.zeros((count, 3), dtype=np.float64)
    if count == 0:
        return buffer

    angle_step = 2 * math.pi / count
    for i in range(count):
        angle = i * angle_step
        buffer[i] = (
            radius * math.cos(angle),
            math.sin(angle * 2) * height_factor * radius,
            radius * math.sin(angle),
        )
    return buffer


class ForceLayoutSolver:
    """
    Deterministic force-directed layout for requirement dependency graphs.

    Each `solve` call owns its position buffer and keeps no state between
    calls, so one solver may be shared across threads.
    """

    def __init__(self, parameters: LayoutParameters | None = None) -> None:
        """
        Initialize the solver.

        Args:
            parameters: Layout constants (uses defaults if not provided)
        """
        self.parameters = parameters or LayoutParameters()

    def solve(self, nodes: Sequence[RequirementNode]) -> PositionMap:
        """
        Compute one position per node.

        Args:
            nodes: Requirement records; order determines the seed angle

        Returns:
            PositionMap keyed by node id, in input order

        Raises:
            ValidationError: If node ids are not unique
        """
        graph = DependencyGraph.from_nodes(nodes)
        if not graph.node_ids:
            return PositionMap.empty()

        params = self.parameters
        positions = initial_positions(len(graph), params.initial_radius, params.height_factor)
        sources, targets = graph.edge_index_arrays()

        for iteration in range(params.iterations):
            forces = self._repulsion(positions) + self._attraction(positions, sources, targets)
            damping = BASE_DAMPING * (1 - iteration / params.iterations)
            positions = positions + forces * damping

        logger.info(
            "layout_computed",
            node_count=len(graph),
            edge_count=len(graph.edges),
            dangling_count=len(graph.dangling),
            iterations=params.iterations,
        )
        return PositionMap.from_array(graph.node_ids, positions, graph.edges)

    def _repulsion(self, positions: np.ndarray) -> np.ndarray:
        """Inverse-square push of each node away from its near neighbours."""
        params = self.parameters

        # delta[a, b] = positions[a] - positions[b]
        delta = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
        distance = np.sqrt(np.einsum("abk,abk->ab", delta, delta))

        active = (distance <= params.repulsion_cutoff) & (distance >= params.repulsion_epsilon)
        np.fill_diagonal(active, False)

        safe = np.where(active, distance, 1.0)
        magnitude = np.where(active, 1.0 / safe**3, 0.0)
        return np.einsum("ab,abk->ak", magnitude, delta)

    def _attraction(
        self,
        positions: np.ndarray,
        sources: np.ndarray,
        targets: np.ndarray,
    ) -> np.ndarray:
        """Linear spring pull along every edge, felt by both endpoints."""
        forces = np.zeros_like(positions)
        if sources.size == 0:
            return forces

        params = self.parameters
        delta = positions[targets] - positions[sources]
        distance = np.linalg.norm(delta, axis=1)

        # (delta / d) * d * k, skipped for near-coincident endpoints
        pull = np.where(
            (distance >= params.attraction_epsilon)[:, np.newaxis],
            delta * params.spring_constant,
            0.0,
        )
        np.add.at(forces, sources, pull)
        np.add.at(forces, targets, -pull)
        return forces


def compute_layout(
    nodes: Sequence[RequirementNode],
    parameters: LayoutParameters | None = None,
) -> PositionMap:
    """Lay out `nodes` with a fresh solver."""
    return ForceLayoutSolver(parameters).solve(nodes)


async def compute_layout_async(
    nodes: Sequence[RequirementNode],
    parameters: LayoutParameters | None = None,
) -> PositionMap:
    """
    Lay out `nodes` in a worker thread.

    Runs the solve in the default executor and awaits the result on the
    caller's event loop.
    """
    return await asyncio.to_thread(compute_layout, list(nodes), parameters)
