"""
Path Finder Module

Bounded breadth-first search between two concepts. The graph is never
materialized: each frontier node's neighbors are discovered on demand.
"""

import logging
import threading
from collections import deque
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from conceptgraph.models.discovery_models import ConceptPath, RelatedConcept

from .concept_normalizer import normalize_concept
from .relationship_discovery import RelationshipDiscovery, get_relationship_discovery

logger = logging.getLogger(__name__)

DIRECT_NEIGHBOR_LIMIT = 5
INDIRECT_NEIGHBOR_LIMIT = 3
DEFAULT_EDGE_CONFIDENCE = 0.5
DEFAULT_MAX_DEPTH = 3


@dataclass
class _SearchNode:
    """Queue entry for the breadth-first search."""

    concept: str
    path: list[str] = field(default_factory=list)
    relationships: list[str] = field(default_factory=list)
    confidence: float = 1.0


class PathFinder:
    """Service for finding shortest paths between concepts."""

    def __init__(self, discovery: RelationshipDiscovery | None = None):
        self.discovery = discovery or get_relationship_discovery()

    async def iter_neighbors(self, concept: str) -> AsyncIterator[RelatedConcept]:
        """Yield the top direct then top indirect relationships of a concept."""
        relations = await self.discovery.discover(concept)
        for relation in relations.direct_relationships[:DIRECT_NEIGHBOR_LIMIT]:
            yield relation
        for relation in relations.indirect_relationships[:INDIRECT_NEIGHBOR_LIMIT]:
            yield relation

    async def shortest_path(
        self, start: str, end: str, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> ConceptPath | None:
        """
        Find the shortest path between two concepts.

        Args:
            start: Concept to start from
            end: Concept to reach
            max_depth: Maximum number of concepts on a path, start included

        Returns:
            ConceptPath for the first path found, or None if the end concept
            is unreachable within max_depth. Never raises.
        """
        if not start or not start.strip() or not end or not end.strip():
            return None

        start = normalize_concept(start)
        end = normalize_concept(end)

        try:
            visited: set[str] = {start}
            queue: deque[_SearchNode] = deque([_SearchNode(concept=start, path=[start])])

            while queue and len(queue[0].path) <= max_depth:
                current = queue.popleft()

                if normalize_concept(current.concept) == end:
                    return ConceptPath(
                        start_concept=start,
                        end_concept=end,
                        path=current.path,
                        relationships=current.relationships,
                        path_length=len(current.path) - 1,
                        confidence=current.confidence,
                    )

                if len(current.path) >= max_depth:
                    continue

                async for relation in self.iter_neighbors(current.concept):
                    key = normalize_concept(relation.concept)
                    if key in visited:
                        continue
                    visited.add(key)
                    queue.append(
                        _SearchNode(
                            concept=relation.concept,
                            path=current.path + [relation.concept],
                            relationships=current.relationships
                            + [relation.relationship],
                            confidence=current.confidence
                            * (relation.confidence or DEFAULT_EDGE_CONFIDENCE),
                        )
                    )

            logger.debug(f"No path from '{start}' to '{end}' within depth {max_depth}")
            return None

        except Exception as e:
            logger.error(
                f"Error finding path from '{start}' to '{end}': {e}", exc_info=True
            )
            return None


# Factory function with thread-safe singleton
_path_finder: PathFinder | None = None
_singleton_lock = threading.Lock()


def get_path_finder() -> PathFinder:
    """Get the global path finder instance (thread-safe)."""
    global _path_finder
    if _path_finder is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _path_finder is None:
                _path_finder = PathFinder()
    return _path_finder
