"""
Requirement Map Schema
======================

Node types accepted by the layout engine.

Version: 0.1.0
"""

from services.requirement_map.schema.nodes import (
    Importance,
    Position,
    RequirementNode,
)

__all__ = [
    "Importance",
    "Position",
    "RequirementNode",
]
