"""
Unit tests for bridge concept discovery.
"""

import pytest

from conceptgraph.models.discovery_models import RelatedConcept
from conceptgraph.services.discovery.bridge_finder import (
    MAX_BRIDGE_INPUT,
    BridgeFinder,
)


def rel(concept, confidence=0.5):
    return RelatedConcept(
        concept=concept, relationship="tag", source="tags", confidence=confidence
    )


@pytest.fixture
def discovery(make_discovery):
    return make_discovery(
        direct={
            "a": [rel("x"), rel("y"), rel("p")],
            "b": [rel("x"), rel("y")],
            "c": [rel("y"), rel("q")],
        }
    )


class TestFindBridges:
    """Tests for BridgeFinder.find_bridges."""

    @pytest.mark.asyncio
    async def test_bridges_ranked_by_pair_count(self, discovery):
        finder = BridgeFinder(discovery=discovery)

        bridges = await finder.find_bridges(["a", "b", "c"])

        # y connects all three pairs, x only (a, b)
        assert bridges == ["y", "x"]

    @pytest.mark.asyncio
    async def test_each_concept_discovered_once(self, discovery):
        finder = BridgeFinder(discovery=discovery)

        await finder.find_bridges(["a", "b", "c"])

        assert sorted(discovery.calls) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_no_sharing_between_calls(self, discovery):
        finder = BridgeFinder(discovery=discovery)

        await finder.find_bridges(["a", "b"])
        await finder.find_bridges(["a", "b"])

        assert sorted(discovery.calls) == ["a", "a", "b", "b"]

    @pytest.mark.asyncio
    async def test_fewer_than_two_concepts(self, discovery):
        finder = BridgeFinder(discovery=discovery)

        assert await finder.find_bridges([]) == []
        assert await finder.find_bridges(None) == []
        assert await finder.find_bridges(["a"]) == []
        assert discovery.calls == []

    @pytest.mark.asyncio
    async def test_indirect_relationships_count(self, make_discovery):
        discovery = make_discovery(
            direct={"a": [rel("x")]},
            indirect={"b": [rel("x", 0.2)]},
        )
        finder = BridgeFinder(discovery=discovery)

        assert await finder.find_bridges(["a", "b"]) == ["x"]

    @pytest.mark.asyncio
    async def test_input_capped(self, make_discovery):
        concepts = [f"c{i}" for i in range(MAX_BRIDGE_INPUT + 3)]
        discovery = make_discovery(direct={c: [rel("shared")] for c in concepts})
        finder = BridgeFinder(discovery=discovery)

        bridges = await finder.find_bridges(concepts)

        assert bridges == ["shared"]
        assert sorted(discovery.calls) == sorted(concepts[:MAX_BRIDGE_INPUT])

    @pytest.mark.asyncio
    async def test_failed_pair_is_skipped(self, make_discovery):
        discovery = make_discovery(
            direct={"a": [rel("x")], "c": [rel("x")]},
            fail_on={"b"},
        )
        finder = BridgeFinder(discovery=discovery)

        # (a, b) and (b, c) fail; (a, c) still contributes
        assert await finder.find_bridges(["a", "b", "c"]) == ["x"]
