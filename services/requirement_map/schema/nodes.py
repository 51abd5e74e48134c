"""
Requirement Map Node Definitions
================================

Pydantic models for the requirement records fed to the layout engine.

Version: 0.1.0
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class Importance(str, Enum):
    """Requirement importance, interpreted only by the presentation layer."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RequirementNode(BaseModel):
    """
    A requirement to be positioned in the 3D dependency map.

    Only `id` and `dependencies` influence the layout. The remaining fields
    travel with the node so a renderer can label and color it.
    """

    model_config = {"frozen": True}

    # Core identity
    id: str = Field(..., min_length=1, description="Unique requirement ID")
    importance: Importance = Field(default=Importance.MEDIUM)
    dependencies: tuple[str, ...] = Field(
        default=(),
        description="IDs of requirements this one depends on, in order",
    )

    # Display
    name: str = Field(default="", description="Human-readable name (defaults to id)")
    category: str | None = Field(default=None, description="e.g. governance, technical")
    description: str | None = None
    completed: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def default_name_to_id(cls, data: Any) -> Any:
        """Use the id as display name when none is given."""
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            return {**data, "name": data["id"]}
        return data


Position = tuple[float, float, float]
