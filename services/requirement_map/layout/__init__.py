"""
Requirement Map Layout Engine
=============================

Force-directed 3D positioning of requirement dependency graphs.

Modules:
- graph: Node validation and dependency edge indexing
- solver: Circular seed + damped repulsion/attraction relaxation
- positions: Immutable output map and recompute-on-change cache

Usage:
    from services.requirement_map.layout import compute_layout

    positions = compute_layout(nodes)
    x, y, z = positions["REQ-1"]

Version: 0.1.0
"""

from services.requirement_map.layout.graph import DependencyGraph, ValidationError
from services.requirement_map.layout.positions import PositionCache, PositionMap
from services.requirement_map.layout.solver import (
    ForceLayoutSolver,
    LayoutParameters,
    compute_layout,
    compute_layout_async,
    initial_positions,
)


__all__ = [
    # Graph
    "DependencyGraph",
    "ValidationError",
    # Solver
    "ForceLayoutSolver",
    "LayoutParameters",
    "compute_layout",
    "compute_layout_async",
    "initial_positions",
    # Output
    "PositionMap",
    "PositionCache",
]
