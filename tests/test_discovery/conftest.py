"""Shared fixtures for the concept discovery tests."""

import pytest

from conceptgraph.models.discovery_models import ConceptRelationships, RelatedConcept


class InMemoryRegistryStore:
    """
    Registry store keyed by the exact query prefix.

    hits = {"tags": {"java": ["javascript", "java"]}, ...}
    Every search is recorded in ``calls`` as (registry, prefix, limit).
    """

    def __init__(self, hits: dict[str, dict[str, list[str]]] | None = None):
        self.hits = hits or {}
        self.calls: list[tuple[str, str, int | None]] = []

    def search_prefix(self, registry, prefix, limit=None):
        self.calls.append((registry, prefix, limit))
        results = list(self.hits.get(registry, {}).get(prefix, []))
        if limit is not None:
            results = results[:limit]
        return results


class FakeDiscovery:
    """
    Discovery stand-in backed by a fixed adjacency map.

    direct / indirect map a normalized concept to its relationships.
    """

    def __init__(self, direct=None, indirect=None, fail_on=None):
        self.direct: dict[str, list[RelatedConcept]] = direct or {}
        self.indirect: dict[str, list[RelatedConcept]] = indirect or {}
        self.fail_on = set(fail_on or [])
        self.calls: list[str] = []

    async def discover(self, concept):
        self.calls.append(concept)
        key = concept.strip().lower()
        if key in self.fail_on:
            raise RuntimeError(f"discovery failed for {key}")
        return ConceptRelationships(
            concept=concept,
            direct_relationships=list(self.direct.get(key, [])),
            indirect_relationships=list(self.indirect.get(key, [])),
        )


@pytest.fixture
def make_store():
    """Factory for in-memory registry stores."""
    return InMemoryRegistryStore


@pytest.fixture
def make_discovery():
    """Factory for fake discovery services."""
    return FakeDiscovery
