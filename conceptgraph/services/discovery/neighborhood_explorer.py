"""
Neighborhood Explorer Module

Builds the conceptual neighborhood around a concept:
- Immediate neighbors (direct relationships)
- Extended neighbors (direct relationships of the first neighbors)
- Bridge concepts within the neighborhood
- Word/prefix clusters
- Shortest pathways from the central concept to nearby concepts
"""

import asyncio
import logging
import threading

from conceptgraph.models.discovery_models import (
    ConceptNeighborhood,
    ConceptPath,
    RelatedConcept,
)

from .bridge_finder import BridgeFinder, get_bridge_finder
from .clustering import greedy_cluster, is_neighborhood_similar
from .path_finder import DEFAULT_EDGE_CONFIDENCE, PathFinder, get_path_finder
from .relationship_discovery import RelationshipDiscovery, get_relationship_discovery

logger = logging.getLogger(__name__)

MAX_IMMEDIATE_NEIGHBORS = 12
MAX_EXTENDED_NEIGHBORS = 20
MAX_NEIGHBORHOOD_CLUSTERS = 6
MAX_BRIDGE_CONCEPTS = 5
MAX_PATHWAYS = 8

NEIGHBORS_TO_EXPAND = 8
EXTENDED_PER_NEIGHBOR = 5
EXTENDED_CONFIDENCE_FACTOR = 0.8
BRIDGE_INPUT_LIMIT = 10
PATHWAY_TARGETS = 6
PATHWAY_MAX_DEPTH = 3


class NeighborhoodExplorer:
    """
    Service for exploring the neighborhood of a concept.

    Layers on the discovery service; bridge finding and pathfinding are
    delegated to their own services.
    """

    def __init__(
        self,
        discovery: RelationshipDiscovery | None = None,
        bridge_finder: BridgeFinder | None = None,
        path_finder: PathFinder | None = None,
    ):
        """
        Initialize the neighborhood explorer.

        Args:
            discovery: Relationship discovery instance
            bridge_finder: Bridge finder instance
            path_finder: Path finder instance
        """
        self.discovery = discovery or get_relationship_discovery()
        self.bridge_finder = bridge_finder or BridgeFinder(self.discovery)
        self.path_finder = path_finder or PathFinder(self.discovery)

    async def explore(self, concept: str | None, depth: int = 2) -> ConceptNeighborhood:
        """
        Explore the conceptual neighborhood around a concept.

        Args:
            concept: Central concept
            depth: 1 for immediate neighbors only, >1 to add extended neighbors

        Returns:
            ConceptNeighborhood with every list capped. Never raises.
        """
        if not concept or not concept.strip():
            return ConceptNeighborhood(central_concept=concept or "")

        try:
            relationships = await self.discovery.discover(concept)
            immediate_neighbors = relationships.direct_relationships
            extended_neighbors: list[RelatedConcept] = []
            all_neighbor_concepts = [n.concept for n in immediate_neighbors]

            if depth > 1:
                extended_neighbors = await self._expand_neighbors(
                    concept, immediate_neighbors
                )
                all_neighbor_concepts.extend(n.concept for n in extended_neighbors)

            bridge_concepts = await self.bridge_finder.find_bridges(
                ([concept] + all_neighbor_concepts)[:BRIDGE_INPUT_LIMIT]
            )

            neighborhood_clusters = greedy_cluster(
                [concept] + all_neighbor_concepts,
                is_neighborhood_similar,
                max_clusters=MAX_NEIGHBORHOOD_CLUSTERS,
            )

            pathways = await self._find_pathways(concept, all_neighbor_concepts)

            logger.info(
                f"Explored neighborhood of '{concept}': "
                f"{len(immediate_neighbors)} immediate, "
                f"{len(extended_neighbors)} extended, "
                f"{len(pathways)} pathways"
            )

            return ConceptNeighborhood(
                central_concept=concept,
                immediate_neighbors=immediate_neighbors[:MAX_IMMEDIATE_NEIGHBORS],
                extended_neighbors=extended_neighbors[:MAX_EXTENDED_NEIGHBORS],
                neighborhood_clusters=neighborhood_clusters,
                bridge_concepts=bridge_concepts[:MAX_BRIDGE_CONCEPTS],
                pathways=pathways[:MAX_PATHWAYS],
            )

        except Exception as e:
            logger.error(
                f"Error exploring concept neighborhood for '{concept}': {e}",
                exc_info=True,
            )
            return ConceptNeighborhood(central_concept=concept)

    async def _expand_neighbors(
        self, concept: str, immediate_neighbors: list[RelatedConcept]
    ) -> list[RelatedConcept]:
        """Collect every second-hop neighbor through the first immediate neighbors."""
        neighbor_results = await asyncio.gather(
            *(
                self.discovery.discover(neighbor.concept)
                for neighbor in immediate_neighbors[:NEIGHBORS_TO_EXPAND]
            )
        )

        central = concept.strip().lower()
        known = {n.concept for n in immediate_neighbors}
        extended: list[RelatedConcept] = []

        for result in neighbor_results:
            for candidate in result.direct_relationships[:EXTENDED_PER_NEIGHBOR]:
                if candidate.concept.lower() == central or candidate.concept in known:
                    continue
                known.add(candidate.concept)
                extended.append(
                    candidate.model_copy(
                        update={
                            "confidence": (
                                candidate.confidence or DEFAULT_EDGE_CONFIDENCE
                            )
                            * EXTENDED_CONFIDENCE_FACTOR
                        }
                    )
                )

        return extended

    async def _find_pathways(
        self, concept: str, neighbor_concepts: list[str]
    ) -> list[ConceptPath]:
        """Find shortest paths from the central concept to nearby concepts."""
        central = concept.strip().lower()
        targets = [c for c in neighbor_concepts if c.strip().lower() != central]

        pathways: list[ConceptPath] = []
        for target in targets[:PATHWAY_TARGETS]:
            pathway = await self.path_finder.shortest_path(
                concept, target, PATHWAY_MAX_DEPTH
            )
            if pathway:
                pathways.append(pathway)

        return sorted(pathways, key=lambda p: (p.path_length, -p.confidence))


# Factory function with thread-safe singleton
_neighborhood_explorer: NeighborhoodExplorer | None = None
_singleton_lock = threading.Lock()


def get_neighborhood_explorer() -> NeighborhoodExplorer:
    """Get the global neighborhood explorer instance (thread-safe)."""
    global _neighborhood_explorer
    if _neighborhood_explorer is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _neighborhood_explorer is None:
                _neighborhood_explorer = NeighborhoodExplorer(
                    discovery=get_relationship_discovery(),
                    bridge_finder=get_bridge_finder(),
                    path_finder=get_path_finder(),
                )
    return _neighborhood_explorer
