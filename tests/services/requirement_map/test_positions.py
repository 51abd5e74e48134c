"""
Tests for the Position Map and Cache
====================================

Version: 0.1.0
"""

from collections.abc import Mapping

import numpy as np
import pytest

from services.requirement_map.layout import (
    ForceLayoutSolver,
    LayoutParameters,
    PositionCache,
    PositionMap,
    ValidationError,
)
from services.requirement_map.schema.nodes import RequirementNode


class TestPositionMap:
    """Tests for the immutable output map."""

    def test_from_array(self) -> None:
        buffer = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

        positions = PositionMap.from_array(["a", "b"], buffer, [("a", "b")])

        assert positions["a"] == (1.0, 2.0, 3.0)
        assert list(positions) == ["a", "b"]
        assert positions.edges == (("a", "b"),)

    def test_is_mapping(self) -> None:
        positions = PositionMap({"a": (0.0, 0.0, 0.0)})

        assert isinstance(positions, Mapping)
        assert "a" in positions
        assert positions.get("missing") is None
        assert len(positions) == 1

    def test_read_only(self) -> None:
        positions = PositionMap({"a": (0.0, 0.0, 0.0)})

        with pytest.raises(TypeError):
            positions["a"] = (1.0, 1.0, 1.0)  # type: ignore[index]

    def test_source_mutation_not_visible(self) -> None:
        source = {"a": (0.0, 0.0, 0.0)}
        positions = PositionMap(source)

        source["b"] = (1.0, 1.0, 1.0)

        assert "b" not in positions

    def test_to_dict(self) -> None:
        positions = PositionMap({"a": (1.0, 2.0, 3.0), "b": (0.0, 0.0, 0.0)}, [("a", "b")])

        assert positions.to_dict() == {
            "positions": {"a": [1.0, 2.0, 3.0], "b": [0.0, 0.0, 0.0]},
            "edges": [["a", "b"]],
        }

    def test_empty(self) -> None:
        assert len(PositionMap.empty()) == 0
        assert PositionMap.empty().edges == ()


class TestPositionCache:
    """Recompute only when the node list object changes."""

    @pytest.fixture
    def cache(self) -> PositionCache:
        return PositionCache(ForceLayoutSolver(LayoutParameters(iterations=5)))

    def test_same_list_reuses_result(
        self,
        cache: PositionCache,
        sample_requirements: list[RequirementNode],
    ) -> None:
        first = cache.positions(sample_requirements)
        second = cache.positions(sample_requirements)

        assert first is second
        assert cache.recompute_count == 1

    def test_new_list_recomputes(
        self,
        cache: PositionCache,
        sample_requirements: list[RequirementNode],
    ) -> None:
        first = cache.positions(sample_requirements)
        second = cache.positions(list(sample_requirements))

        assert first is not second
        assert dict(first) == dict(second)
        assert cache.recompute_count == 2

    def test_invalidate(
        self,
        cache: PositionCache,
        sample_requirements: list[RequirementNode],
    ) -> None:
        cache.positions(sample_requirements)
        cache.invalidate()
        cache.positions(sample_requirements)

        assert cache.recompute_count == 2

    def test_failed_validation_leaves_cache_empty(
        self,
        cache: PositionCache,
        sample_requirements: list[RequirementNode],
    ) -> None:
        cache.positions(sample_requirements)
        duplicated = [*sample_requirements, sample_requirements[0]]

        with pytest.raises(ValidationError):
            cache.positions(duplicated)

        # The earlier result is not served for the old list either
        cache.positions(sample_requirements)
        assert cache.recompute_count == 2

    def test_default_solver(self) -> None:
        cache = PositionCache()

        assert cache.solver.parameters == LayoutParameters()
        assert cache.positions([]) == {}
