"""
Layout Routes
=============

API endpoints that compute requirement map layouts.

Version: 0.1.0
"""

from dataclasses import asdict, replace
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from shared.config import settings
from shared.logging import get_logger

from services.requirement_map.layout import (
    LayoutParameters,
    PositionMap,
    compute_layout_async,
)
from services.requirement_map.presentation import build_scene
from services.requirement_map.schema.nodes import Importance, RequirementNode


logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================


class LayoutParametersRequest(BaseModel):
    """Per-request overrides of the configured layout constants."""

    initial_radius: float | None = Field(default=None, gt=0.0)
    height_factor: float | None = None
    iterations: int | None = Field(default=None, ge=0, le=1000)
    spring_constant: float | None = Field(default=None, ge=0.0)
    repulsion_cutoff_factor: float | None = Field(default=None, ge=0.0)
    attraction_epsilon: float | None = Field(default=None, ge=0.0)

    def resolve(self) -> LayoutParameters:
        """Merge overrides onto the configured defaults."""
        base = LayoutParameters.from_settings(settings.layout)
        return replace(base, **self.model_dump(exclude_none=True))


class LayoutRequest(BaseModel):
    """Nodes to lay out."""

    nodes: list[RequirementNode] = Field(default_factory=list, max_length=1000)
    parameters: LayoutParametersRequest = Field(default_factory=LayoutParametersRequest)


class SceneRequest(LayoutRequest):
    """Nodes to lay out plus the current selection."""

    selected_id: str | None = None


class LayoutResponse(BaseModel):
    """Solved positions."""

    positions: dict[str, tuple[float, float, float]]
    edges: list[tuple[str, str]]
    node_count: int
    edge_count: int


class SceneNodeResponse(BaseModel):
    """A node marker."""

    id: str
    name: str
    position: tuple[float, float, float]
    size: float
    importance: Importance
    category: str | None
    completed: bool | None
    selected: bool


class SceneSegmentResponse(BaseModel):
    """A dependency line."""

    source_id: str
    target_id: str
    start: tuple[float, float, float]
    end: tuple[float, float, float]
    highlighted: bool


class SceneResponse(BaseModel):
    """Renderable requirement map."""

    nodes: list[SceneNodeResponse]
    segments: list[SceneSegmentResponse]
    selected_id: str | None


# =============================================================================
# Helpers
# =============================================================================


async def _solve(request: LayoutRequest) -> PositionMap:
    """Run the solver off the event loop, mapping failures to HTTP errors."""
    try:
        parameters = request.parameters.resolve()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    # Duplicate ids surface as ValidationError, handled at the app level
    return await compute_layout_async(request.nodes, parameters)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=LayoutResponse)
async def create_layout(request: LayoutRequest) -> LayoutResponse:
    """
    Compute 3D positions for a requirement dependency graph.

    Dependencies on ids missing from the request are ignored.
    Duplicate node ids are rejected with 422.
    """
    positions = await _solve(request)

    return LayoutResponse(
        **positions.to_dict(),
        node_count=len(positions),
        edge_count=len(positions.edges),
    )


@router.post("/scene", response_model=SceneResponse)
async def create_scene(request: SceneRequest) -> dict[str, Any]:
    """
    Compute a layout and return it as renderable markers and segments.

    When `selected_id` is set, only connections of the selected requirement
    and of requirements depending on it are returned.
    """
    positions = await _solve(request)
    view = build_scene(request.nodes, positions, selected_id=request.selected_id)

    logger.debug(
        "scene_built",
        node_count=len(view.nodes),
        segment_count=len(view.segments),
        selected_id=request.selected_id,
    )

    return {
        "nodes": [asdict(node) for node in view.nodes],
        "segments": [asdict(segment) for segment in view.segments],
        "selected_id": view.selected_id,
    }
