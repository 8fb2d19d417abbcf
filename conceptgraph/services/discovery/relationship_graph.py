"""
Relationship Graph Builder Module

This module assembles a weighted graph over an arbitrary set of concepts:
- Nodes typed by a keyword heuristic
- Edges from each concept's discovered relationships
- Degree centrality, normalized into [0, 1]
- Connected-component clusters with a centroid
"""

import logging
import threading

from conceptgraph.models.discovery_models import (
    ConceptCluster,
    ConceptEdge,
    ConceptNode,
    RelationshipGraph,
)

from .concept_normalizer import normalize_concept
from .path_finder import DEFAULT_EDGE_CONFIDENCE
from .relationship_discovery import RelationshipDiscovery, get_relationship_discovery

logger = logging.getLogger(__name__)

CATEGORY_LITERALS = ("primary", "secondary", "reference")

DEFAULT_MAX_NODES = 50
DIRECT_EDGES_PER_NODE = 8
INDIRECT_EDGES_PER_NODE = 4
EDGES_PER_NODE_LIMIT = 3
MAX_CLUSTERS = 8
MIN_CLUSTER_SIZE = 3


def infer_node_type(concept: str) -> str:
    """Infer node type based on concept characteristics."""
    c = concept.lower()

    if c in CATEGORY_LITERALS:
        return "category"

    if "type" in c or "kind" in c or "class" in c:
        return "ontology"

    # Concepts connecting multiple domains
    if "system" in c or "framework" in c or "platform" in c:
        return "bridge"

    return "tag"


def infer_cluster_type(concepts: list[str]) -> str:
    """Infer cluster type based on the concepts in the cluster."""
    lowered = [c.lower() for c in concepts]

    if any(c in CATEGORY_LITERALS for c in lowered):
        return "categorical"

    if any("parent" in c or "child" in c or "type" in c for c in lowered):
        return "hierarchical"

    return "semantic"


def calculate_centrality(
    nodes: list[ConceptNode], edges: list[ConceptEdge]
) -> dict[str, float]:
    """
    Calculate degree centrality for the graph nodes.

    Bidirectional edges count for both endpoints; scores are divided by the
    highest raw score so the most connected node gets 1.0.
    """
    adjacency: dict[str, list[str]] = {node.concept: [] for node in nodes}

    for edge in edges:
        if edge.source in adjacency:
            adjacency[edge.source].append(edge.target)
        if edge.bidirectional and edge.target in adjacency:
            adjacency[edge.target].append(edge.source)

    return normalize_scores(
        {concept: float(len(neighbors)) for concept, neighbors in adjacency.items()}
    )


def normalize_scores(scores: dict[str, float]) -> dict[str, float]:
    """Divide every score by the maximum; all-zero scores stay zero."""
    max_score = max(scores.values(), default=0.0)
    if max_score <= 0:
        return {concept: 0.0 for concept in scores}
    return {concept: score / max_score for concept, score in scores.items()}


def find_connected_component(
    start: str, edges: list[ConceptEdge], processed: set[str]
) -> list[str]:
    """Stack-based depth-first search for the component containing start."""
    component: list[str] = []
    stack = [start]
    visited: set[str] = set()

    while stack:
        current = stack.pop()
        if current in visited:
            continue

        visited.add(current)
        processed.add(current)
        component.append(current)

        for edge in edges:
            if edge.source == current and edge.target not in visited:
                stack.append(edge.target)
            if edge.bidirectional and edge.target == current and edge.source not in visited:
                stack.append(edge.source)

    return component


def find_cluster_centroid(concepts: list[str], edges: list[ConceptEdge]) -> str:
    """Return the member with the most edges inside the cluster (first wins ties)."""
    members = set(concepts)
    connection_counts = {concept: 0 for concept in concepts}

    for edge in edges:
        if edge.source in members and edge.target in members:
            connection_counts[edge.source] += 1
            if edge.bidirectional:
                connection_counts[edge.target] += 1

    centroid = concepts[0]
    max_connections = -1
    for concept, count in connection_counts.items():
        if count > max_connections:
            max_connections = count
            centroid = concept
    return centroid


def build_graph_clusters(
    nodes: list[ConceptNode], edges: list[ConceptEdge]
) -> list[ConceptCluster]:
    """Build clusters from the connected components of the graph."""
    clusters: list[ConceptCluster] = []
    processed: set[str] = set()

    for node in nodes:
        if node.concept in processed:
            continue

        component = find_connected_component(node.concept, edges, processed)
        if len(component) >= MIN_CLUSTER_SIZE:
            clusters.append(
                ConceptCluster(
                    id=f"cluster-{len(clusters)}",
                    concepts=component,
                    cluster_type=infer_cluster_type(component),
                    centroid=find_cluster_centroid(component, edges),
                )
            )

    return clusters


class RelationshipGraphBuilder:
    """Service for building relationship graphs over a concept set."""

    def __init__(self, discovery: RelationshipDiscovery | None = None):
        self.discovery = discovery or get_relationship_discovery()

    async def build_graph(
        self, concepts: list[str] | None, max_nodes: int = DEFAULT_MAX_NODES
    ) -> RelationshipGraph:
        """
        Build a relationship graph from a set of concepts.

        Args:
            concepts: Concepts to place in the graph
            max_nodes: Maximum number of input concepts (and nodes)

        Returns:
            RelationshipGraph with nodes, edges, clusters, and centrality.
            An empty graph is returned on failure.
        """
        if not concepts or max_nodes <= 0:
            return RelationshipGraph()

        nodes: list[ConceptNode] = []
        edges: list[ConceptEdge] = []
        node_map: dict[str, ConceptNode] = {}
        edge_keys: set[frozenset[str]] = set()

        try:
            for raw_concept in concepts[:max_nodes]:
                if not raw_concept or not raw_concept.strip():
                    continue
                concept = normalize_concept(raw_concept)
                if concept in node_map:
                    continue

                node = ConceptNode(concept=concept, type=infer_node_type(concept))
                nodes.append(node)
                node_map[concept] = node

                relations = await self.discovery.discover(concept)

                node.collections = list(
                    dict.fromkeys(r.source for r in relations.direct_relationships)
                )

                candidates = (
                    relations.direct_relationships[:DIRECT_EDGES_PER_NODE]
                    + relations.indirect_relationships[:INDIRECT_EDGES_PER_NODE]
                )
                for relation in candidates:
                    target = normalize_concept(relation.concept)
                    edge_key = frozenset((concept, target))
                    if edge_key in edge_keys:
                        continue
                    edge_keys.add(edge_key)
                    edges.append(
                        ConceptEdge(
                            source=concept,
                            target=target,
                            relationship=relation.relationship,
                            weight=(
                                relation.confidence
                                if relation.confidence is not None
                                else DEFAULT_EDGE_CONFIDENCE
                            ),
                            bidirectional=relation.source == "ontology",
                        )
                    )

            centrality = calculate_centrality(nodes, edges)
            for node in nodes:
                node.weight = centrality.get(node.concept, 0.0)

            clusters = build_graph_clusters(nodes, edges)

            logger.info(
                f"Built relationship graph: {len(nodes)} nodes, "
                f"{len(edges)} edges, {len(clusters)} clusters"
            )

            return RelationshipGraph(
                nodes=nodes[:max_nodes],
                edges=edges[: max_nodes * EDGES_PER_NODE_LIMIT],
                clusters=clusters[:MAX_CLUSTERS],
                centrality=centrality,
            )

        except Exception as e:
            logger.error(f"Error building relationship graph: {e}", exc_info=True)
            return RelationshipGraph()


# Factory function with thread-safe singleton
_graph_builder: RelationshipGraphBuilder | None = None
_singleton_lock = threading.Lock()


def get_relationship_graph_builder() -> RelationshipGraphBuilder:
    """Get the global relationship graph builder instance (thread-safe)."""
    global _graph_builder
    if _graph_builder is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _graph_builder is None:
                _graph_builder = RelationshipGraphBuilder()
    return _graph_builder
