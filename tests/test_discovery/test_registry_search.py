"""Unit tests for the async registry search adapter."""

from unittest.mock import MagicMock

import pytest

from conceptgraph.services.discovery.errors import RegistryUnavailable
from conceptgraph.services.discovery.registry_search import RegistrySearch


class TestRegistrySearch:
    """Tests for RegistrySearch."""

    @pytest.mark.asyncio
    async def test_search_each_registry(self, make_store):
        store = make_store(
            {
                "tags": {"java": ["java", "javascript"]},
                "categories": {"java": ["java-category"]},
                "ontology": {"java": ["java-type"]},
            }
        )
        search = RegistrySearch(db=store)

        assert await search.search_tags("java") == ["java", "javascript"]
        assert await search.search_categories("java") == ["java-category"]
        assert await search.search_ontology("java") == ["java-type"]

    @pytest.mark.asyncio
    async def test_search_all_returns_registry_order(self, make_store):
        store = make_store(
            {
                "tags": {"db": ["dbms"]},
                "ontology": {"db": ["db-engine"]},
            }
        )
        search = RegistrySearch(db=store)

        tags, categories, ontology = await search.search_all("db")

        assert tags == ["dbms"]
        assert categories == []
        assert ontology == ["db-engine"]
        assert sorted(call[0] for call in store.calls) == [
            "categories",
            "ontology",
            "tags",
        ]

    @pytest.mark.asyncio
    async def test_limit_passed_to_store(self, make_store):
        store = make_store({"tags": {"a": ["a1", "a2", "a3"]}})
        search = RegistrySearch(db=store)

        assert await search.search_tags("a", limit=2) == ["a1", "a2"]
        assert store.calls == [("tags", "a", 2)]

    @pytest.mark.asyncio
    async def test_blank_prefix_skips_store(self, make_store):
        store = make_store()
        search = RegistrySearch(db=store)

        assert await search.search_tags("   ") == []
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_registry_error_becomes_empty_result(self):
        store = MagicMock()
        store.search_prefix.side_effect = RegistryUnavailable("tags", "disk I/O error")
        search = RegistrySearch(db=store)

        assert await search.search_tags("java") == []

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_empty_result(self):
        store = MagicMock()
        store.search_prefix.side_effect = RuntimeError("boom")
        search = RegistrySearch(db=store)

        tags, categories, ontology = await search.search_all("java")
        assert (tags, categories, ontology) == ([], [], [])
