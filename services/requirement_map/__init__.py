"""
Requirement Map Service
=======================

3D layout engine for requirement dependency graphs.

Features:
- Validation of requirement lists (unique ids, dangling dependency filtering)
- Deterministic force-directed positioning (circular seed, damped relaxation)
- Recompute-on-change position cache
- Presentational scene view (node sizing, selection highlighting)

Port: 8010
"""

__version__ = "0.1.0"
