"""
Unit tests for related concept discovery.

Tests cover:
- Registry fan-out and relationship classification
- Confidence scoring and ordering
- Indirect (second-hop) relationships and their bounds
- Degradation to empty results
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from conceptgraph.services.discovery.registry_search import RegistrySearch
from conceptgraph.services.discovery.relationship_discovery import (
    RelationshipDiscovery,
    infer_relationship_type,
)


def make_discovery_service(store):
    return RelationshipDiscovery(registry_search=RegistrySearch(db=store))


def assert_sorted_by_confidence(relationships):
    confidences = [r.confidence or 0 for r in relationships]
    assert confidences == sorted(confidences, reverse=True)


class TestInferRelationshipType:
    """Tests for the ontology relationship heuristic."""

    def test_related_contains_concept_is_a(self):
        assert infer_relationship_type("java", "java-runtime") == "isA"

    def test_type_or_kind_is_a(self):
        assert infer_relationship_type("data type", "integer") == "isA"
        assert infer_relationship_type("kind of fruit", "apple") == "isA"

    def test_has_a(self):
        assert infer_relationship_type("car has", "engine") == "hasA"
        assert infer_relationship_type("box contains", "toy") == "hasA"
        assert infer_relationship_type("kit includes", "tool") == "hasA"

    def test_is_a_checked_before_has_a(self):
        assert infer_relationship_type("has type", "integer") == "isA"

    def test_default_child_of(self):
        assert infer_relationship_type("java", "programming-language") == "childOf"


class TestDiscover:
    """Tests for RelationshipDiscovery.discover."""

    @pytest.mark.asyncio
    async def test_java_scenario(self, make_store):
        store = make_store(
            {
                "tags": {"java": ["javascript", "java"]},
                "categories": {"java": []},
                "ontology": {"java": ["programming-language"]},
            }
        )
        result = await make_discovery_service(store).discover("java")

        by_concept = {r.concept: r for r in result.direct_relationships}
        assert set(by_concept) == {"javascript", "programming-language"}

        javascript = by_concept["javascript"]
        assert javascript.relationship == "tag"
        assert javascript.source == "tags"
        assert javascript.confidence == 0.8

        language = by_concept["programming-language"]
        assert language.relationship == "childOf"
        assert language.source == "ontology"
        assert language.confidence == pytest.approx(1 / 14)

        assert result.direct_relationships[0].concept == "javascript"

    @pytest.mark.asyncio
    async def test_empty_concept_makes_no_registry_calls(self, make_store):
        store = make_store({"tags": {"": ["anything"]}})
        service = make_discovery_service(store)

        for concept in ["", "   ", None]:
            result = await service.discover(concept)
            assert result.direct_relationships == []
            assert result.indirect_relationships == []
            assert result.semantic_clusters == []

        assert store.calls == []

    @pytest.mark.asyncio
    async def test_query_is_normalized(self, make_store):
        store = make_store({"tags": {"java": ["javascript"]}})
        result = await make_discovery_service(store).discover("  JAVA ")

        assert result.concept == "  JAVA "
        assert [r.concept for r in result.direct_relationships] == ["javascript"]
        assert ("tags", "java", None) in store.calls

    @pytest.mark.asyncio
    async def test_categories_classified(self, make_store):
        store = make_store({"categories": {"prim": ["primary"]}})
        result = await make_discovery_service(store).discover("prim")

        relation = result.direct_relationships[0]
        assert relation.relationship == "category"
        assert relation.source == "categories"

    @pytest.mark.asyncio
    async def test_queried_concept_excluded_case_insensitively(self, make_store):
        store = make_store(
            {
                "tags": {"web": ["Web", "webapp"]},
                "ontology": {"web": ["WEB"]},
            }
        )
        result = await make_discovery_service(store).discover("web")

        concepts = [r.concept.lower() for r in result.direct_relationships]
        assert "web" not in concepts

    @pytest.mark.asyncio
    async def test_duplicates_across_registries_kept_once(self, make_store):
        store = make_store(
            {
                "tags": {"web": ["webapp"]},
                "ontology": {"web": ["webapp", "website"]},
            }
        )
        result = await make_discovery_service(store).discover("web")

        concepts = [r.concept for r in result.direct_relationships]
        assert concepts.count("webapp") == 1
        webapp = next(r for r in result.direct_relationships if r.concept == "webapp")
        assert webapp.source == "tags"

    @pytest.mark.asyncio
    async def test_direct_relationships_sorted_stably(self, make_store):
        store = make_store(
            {
                # "ab" scores 0.8 (substring), "xyz" and "qrs" both score 0.0
                "tags": {"abc": ["xyz", "ab", "qrs"]},
            }
        )
        result = await make_discovery_service(store).discover("abc")

        assert [r.concept for r in result.direct_relationships] == ["ab", "xyz", "qrs"]

    @pytest.mark.asyncio
    async def test_indirect_relationships(self, make_store):
        store = make_store(
            {
                "tags": {
                    "data": ["database"],
                    "database": ["database-index", "data"],
                },
                "ontology": {"database": ["database"]},
            }
        )
        result = await make_discovery_service(store).discover("data")

        indirect = {r.concept: r for r in result.indirect_relationships}
        # the queried concept and the seed itself are never indirect
        assert set(indirect) == {"database-index"}

        relation = indirect["database-index"]
        assert relation.source == "tags"
        assert relation.relationship == "isA"
        assert relation.confidence == pytest.approx(0.8 * 0.7)

    @pytest.mark.asyncio
    async def test_indirect_search_limited_per_registry(self, make_store):
        store = make_store(
            {
                "tags": {
                    "net": ["network"],
                    "network": [f"network-{i}" for i in range(8)],
                },
            }
        )
        result = await make_discovery_service(store).discover("net")

        assert ("tags", "network", 5) in store.calls
        assert len(result.indirect_relationships) == 5

    @pytest.mark.asyncio
    async def test_indirect_bounds(self, make_store):
        seeds = [f"data{i}" for i in range(7)]
        hits = {"data": seeds}
        for seed in seeds:
            hits[seed] = [f"{seed}-child{j}" for j in range(5)]
        store = make_store({"tags": hits})

        result = await make_discovery_service(store).discover("data")

        assert len(result.direct_relationships) == 7
        assert len(result.indirect_relationships) == 10
        expanded = {prefix for registry, prefix, limit in store.calls if limit == 5}
        # only the first five direct relationships are expanded
        assert expanded == set(seeds[:5])
        concepts = [r.concept for r in result.indirect_relationships]
        assert len(concepts) == len(set(concepts))
        assert_sorted_by_confidence(result.indirect_relationships)
        assert all(r.confidence <= 0.7 for r in result.indirect_relationships)

    @pytest.mark.asyncio
    async def test_semantic_clusters(self, make_store):
        store = make_store({"tags": {"data": ["database", "dataset", "databases"]}})
        result = await make_discovery_service(store).discover("data")

        # "database" is a substring of "databases"; "dataset" scores 5/6 against "database"
        assert result.semantic_clusters == [["database", "dataset", "databases"]]

    @pytest.mark.asyncio
    async def test_failure_returns_empty_structure(self):
        registry_search = MagicMock()
        registry_search.search_all = AsyncMock(side_effect=RuntimeError("boom"))
        service = RelationshipDiscovery(registry_search=registry_search)

        result = await service.discover("java")

        assert result.concept == "java"
        assert result.direct_relationships == []
        assert result.indirect_relationships == []
        assert result.semantic_clusters == []
