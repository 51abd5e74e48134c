"""
Requirement Map Routes
======================

API route handlers for the Requirement Map Service.

Routes:
- layout: Layout computation and renderable scene views
"""

from services.requirement_map.routes import layout


__all__ = ["layout"]
