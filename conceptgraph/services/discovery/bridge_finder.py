"""
Bridge Finder Module

Finds concepts that connect several semantic domains: concepts appearing in
the relationship sets of more than one input concept.

Cost is one discovery per concept per pair, O(n^2) in the input size, so the
input is capped and callers should pass only a handful of concepts.
"""

import asyncio
import logging
import threading
from collections import Counter

from conceptgraph.models.discovery_models import ConceptRelationships

from .relationship_discovery import RelationshipDiscovery, get_relationship_discovery

logger = logging.getLogger(__name__)

MAX_BRIDGE_INPUT = 10
MAX_BRIDGE_RESULTS = 10


class BridgeFinder:
    """Service for finding bridge concepts between a set of concepts."""

    def __init__(self, discovery: RelationshipDiscovery | None = None):
        self.discovery = discovery or get_relationship_discovery()

    async def find_bridges(self, concepts: list[str] | None) -> list[str]:
        """
        Find concepts shared by the relationship sets of concept pairs.

        Args:
            concepts: Concepts to connect (only the first MAX_BRIDGE_INPUT are used)

        Returns:
            Bridge concepts sorted by how many pairs they connect, at most
            MAX_BRIDGE_RESULTS. Never raises.
        """
        if not concepts or len(concepts) < 2:
            return []

        concepts = concepts[:MAX_BRIDGE_INPUT]
        frequency: Counter[str] = Counter()
        # Discovery results are shared between pairs of this call only
        pending: dict[str, asyncio.Task] = {}

        def discover_once(concept: str) -> asyncio.Task:
            if concept not in pending:
                pending[concept] = asyncio.ensure_future(
                    self.discovery.discover(concept)
                )
            return pending[concept]

        try:
            for i in range(len(concepts)):
                for j in range(i + 1, len(concepts)):
                    try:
                        relations1, relations2 = await asyncio.gather(
                            discover_once(concepts[i]), discover_once(concepts[j])
                        )
                    except Exception as e:
                        logger.error(
                            f"Error finding bridges between '{concepts[i]}' "
                            f"and '{concepts[j]}': {e}"
                        )
                        continue

                    related1 = _related_concepts(relations1)
                    related2 = _related_concepts(relations2)
                    for concept in related1:
                        if concept in related2:
                            frequency[concept] += 1
        finally:
            for task in pending.values():
                if not task.done():
                    task.cancel()

        # most_common keeps first-seen order among equal counts
        bridges = [concept for concept, _ in frequency.most_common(MAX_BRIDGE_RESULTS)]
        logger.info(f"Found {len(bridges)} bridge concepts across {len(concepts)} concepts")
        return bridges


def _related_concepts(relations: ConceptRelationships) -> dict[str, None]:
    """Ordered set of direct and indirect relationship concepts."""
    related: dict[str, None] = {}
    for relation in relations.direct_relationships + relations.indirect_relationships:
        related.setdefault(relation.concept, None)
    return related


# Factory function with thread-safe singleton
_bridge_finder: BridgeFinder | None = None
_singleton_lock = threading.Lock()


def get_bridge_finder() -> BridgeFinder:
    """Get the global bridge finder instance (thread-safe)."""
    global _bridge_finder
    if _bridge_finder is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _bridge_finder is None:
                _bridge_finder = BridgeFinder()
    return _bridge_finder
