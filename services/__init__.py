"""
Requirement Map Services
========================

Services:
- requirement_map: Force-directed 3D layout of requirement dependency graphs
"""

__all__ = [
    "requirement_map",
]
