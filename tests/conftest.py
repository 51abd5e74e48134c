"""
Test Configuration
==================

Pytest fixtures for requirement map tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from services.requirement_map.schema.nodes import Importance, RequirementNode  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def requirement_map_client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client for Requirement Map Service."""
    from services.requirement_map.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def sample_requirements_data() -> list[dict[str, Any]]:
    """EU AI Act style requirement records, as a client would post them."""
    return [
        {"id": "req-1", "name": "Risk Management", "category": "governance",
         "importance": "high", "completed": True},
        {"id": "req-2", "name": "Data Governance", "category": "technical",
         "importance": "high", "dependencies": ["req-1"]},
        {"id": "req-3", "name": "Documentation", "category": "documentation",
         "importance": "medium", "dependencies": ["req-2"]},
        {"id": "req-4", "name": "Transparency", "category": "transparency",
         "importance": "medium", "dependencies": ["req-2"]},
        {"id": "req-5", "name": "Human Oversight", "category": "governance",
         "importance": "low", "dependencies": ["req-1"]},
        {"id": "req-6", "name": "Record Keeping", "category": "documentation",
         "importance": "low", "dependencies": ["req-3"]},
    ]


@pytest.fixture
def sample_requirements(sample_requirements_data: list[dict[str, Any]]) -> list[RequirementNode]:
    """Sample requirement nodes."""
    return [RequirementNode(**data) for data in sample_requirements_data]


@pytest.fixture
def star_requirements() -> list[RequirementNode]:
    """A and C both depend on B."""
    return [
        RequirementNode(id="A", importance=Importance.HIGH, dependencies=["B"]),
        RequirementNode(id="B", importance=Importance.MEDIUM),
        RequirementNode(id="C", importance=Importance.LOW, dependencies=["B"]),
    ]
