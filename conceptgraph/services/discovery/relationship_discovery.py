"""
Relationship Discovery Service Module

This module discovers concepts related to a given concept across the three
registries:
- Tags registry: general keywords and descriptive metadata
- Categories registry: hierarchical classification
- Ontology registry: semantic relationships (isA, childOf, hasA)

Direct relationships come from a prefix search on the concept itself;
indirect relationships come from a second, bounded hop through the first
direct relationships.
"""

import logging
import threading

from conceptgraph.models.discovery_models import ConceptRelationships, RelatedConcept

from .clustering import greedy_cluster, is_semantically_close
from .concept_normalizer import normalize_concept
from .registry_search import RegistrySearch, get_registry_search
from .similarity import similarity

logger = logging.getLogger(__name__)

# Indirect traversal bounds
INDIRECT_SEED_LIMIT = 5  # direct relationships expanded for the second hop
INDIRECT_HITS_PER_REGISTRY = 5
INDIRECT_RESULT_LIMIT = 10
INDIRECT_CONFIDENCE_FACTOR = 0.7


def infer_relationship_type(concept: str, related: str) -> str:
    """
    Infer the ontological relationship between two concepts.

    Coarse string heuristic, checked in this order:
    - related contains concept, or concept mentions "type"/"kind": isA
    - concept mentions "has"/"contains"/"includes": hasA
    - otherwise: childOf
    """
    c1 = concept.lower()
    c2 = related.lower()

    if c1 in c2 or "type" in c1 or "kind" in c1:
        return "isA"

    if "has" in c1 or "contains" in c1 or "includes" in c1:
        return "hasA"

    return "childOf"


def sort_by_confidence(relationships: list[RelatedConcept]) -> list[RelatedConcept]:
    """Sort relationships by descending confidence, keeping discovery order on ties."""
    return sorted(relationships, key=lambda r: r.confidence or 0, reverse=True)


def empty_relationships(concept: str) -> ConceptRelationships:
    """Relationships result with nothing discovered."""
    return ConceptRelationships(concept=concept)


class RelationshipDiscovery:
    """
    Service for discovering related concepts.

    Every call recomputes from the registries; nothing is cached between
    calls because registry contents may change at any time.
    """

    def __init__(self, registry_search: RegistrySearch | None = None):
        """
        Initialize the discovery service.

        Args:
            registry_search: Registry search adapter instance
        """
        self.registry_search = registry_search or get_registry_search()

    async def discover(self, concept: str | None) -> ConceptRelationships:
        """
        Discover concepts related to the given concept across all registries.

        Args:
            concept: Free-text concept

        Returns:
            ConceptRelationships with direct and indirect relationships sorted
            by confidence, plus semantic clusters. Never raises.
        """
        if not concept or not concept.strip():
            return empty_relationships(concept or "")

        normalized = normalize_concept(concept)

        try:
            tags, categories, ontology = await self.registry_search.search_all(
                normalized
            )

            direct: list[RelatedConcept] = []
            seen: set[str] = {normalized}

            def add_direct(hit: str, relationship: str, source: str) -> None:
                key = hit.lower()
                if key in seen:
                    return
                seen.add(key)
                direct.append(
                    RelatedConcept(
                        concept=hit,
                        relationship=relationship,
                        source=source,
                        confidence=similarity(normalized, key),
                    )
                )

            for tag in tags:
                add_direct(tag, "tag", "tags")
            for category in categories:
                add_direct(category, "category", "categories")
            for ontology_concept in ontology:
                add_direct(
                    ontology_concept,
                    infer_relationship_type(normalized, ontology_concept.lower()),
                    "ontology",
                )

            indirect = await self._find_indirect_relationships(normalized, direct)

            semantic_clusters = greedy_cluster(
                [r.concept for r in direct] + [r.concept for r in indirect],
                is_semantically_close,
            )

            logger.info(
                f"Discovered {len(direct)} direct and {len(indirect)} indirect "
                f"relationships for '{normalized}'"
            )

            return ConceptRelationships(
                concept=concept,
                direct_relationships=sort_by_confidence(direct),
                indirect_relationships=sort_by_confidence(indirect),
                semantic_clusters=semantic_clusters,
            )

        except Exception as e:
            logger.error(
                f"Error discovering related concepts for '{concept}': {e}",
                exc_info=True,
            )
            return empty_relationships(concept)

    async def _find_indirect_relationships(
        self, normalized: str, direct: list[RelatedConcept]
    ) -> list[RelatedConcept]:
        """
        Find second-hop relationships through the first direct relationships.

        Args:
            normalized: The queried concept (normalized)
            direct: Direct relationships in discovery order

        Returns:
            Up to INDIRECT_RESULT_LIMIT relationships with reduced confidence
        """
        indirect: list[RelatedConcept] = []
        processed: set[str] = set()
        queued: set[str] = set()

        for relation in direct[:INDIRECT_SEED_LIMIT]:
            seed = relation.concept
            seed_key = seed.lower()
            if seed_key in processed:
                continue
            processed.add(seed_key)

            tags, categories, ontology = await self.registry_search.search_all(
                normalize_concept(seed), INDIRECT_HITS_PER_REGISTRY
            )
            second_level = (
                [(hit, "tags") for hit in tags]
                + [(hit, "categories") for hit in categories]
                + [(hit, "ontology") for hit in ontology]
            )

            for hit, source in second_level:
                key = hit.lower()
                if key == normalized or key in processed or key in queued:
                    continue
                queued.add(key)
                indirect.append(
                    RelatedConcept(
                        concept=hit,
                        relationship=infer_relationship_type(seed, hit),
                        source=source,
                        confidence=similarity(seed, hit) * INDIRECT_CONFIDENCE_FACTOR,
                    )
                )

        return indirect[:INDIRECT_RESULT_LIMIT]


# Factory function with thread-safe singleton
_relationship_discovery: RelationshipDiscovery | None = None
_singleton_lock = threading.Lock()


def get_relationship_discovery() -> RelationshipDiscovery:
    """Get the global relationship discovery instance (thread-safe)."""
    global _relationship_discovery
    if _relationship_discovery is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _relationship_discovery is None:
                _relationship_discovery = RelationshipDiscovery()
    return _relationship_discovery
