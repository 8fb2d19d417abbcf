"""
Concept Discovery Type Models

Pydantic models for related concepts, neighborhoods, paths, relationship
graphs, and the registry request/response payloads.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ========================================
# REGISTRY MODELS
# ========================================


REGISTRY_NAMES = Literal["tags", "categories", "ontology"]

RELATIONSHIP_KINDS = Literal["isA", "childOf", "hasA", "tag", "category"]


class ConceptCreate(BaseModel):
    """Request model for adding a concept to a registry"""

    name: str


class ConceptBulkCreate(BaseModel):
    """Request model for saving a comma-separated list of concepts"""

    names: str


class MetadataConceptsCreate(BaseModel):
    """Request model for saving ontology concepts from metadata values (isA, childOf, hasA)"""

    fields: list[str]


class SaveSummary(BaseModel):
    """Outcome of a bulk save"""

    requested: int = 0
    saved: int = 0
    failed: int = 0


class RegistrySearchResponse(BaseModel):
    """Response model for a registry prefix search"""

    registry: REGISTRY_NAMES
    prefix: str
    concepts: list[str]


# ========================================
# DISCOVERY MODELS
# ========================================


class RelatedConcept(BaseModel):
    """A concept found in one of the registries relative to a queried concept"""

    model_config = ConfigDict(frozen=True)

    concept: str
    relationship: RELATIONSHIP_KINDS
    source: REGISTRY_NAMES
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class ConceptRelationships(BaseModel):
    """Direct and second-hop relationships for one concept"""

    concept: str
    direct_relationships: list[RelatedConcept] = Field(default_factory=list)
    indirect_relationships: list[RelatedConcept] = Field(default_factory=list)
    semantic_clusters: list[list[str]] = Field(default_factory=list)


class ConceptPath(BaseModel):
    """Shortest path between two concepts"""

    start_concept: str
    end_concept: str
    path: list[str]
    relationships: list[str]
    path_length: int
    confidence: float


class ConceptNeighborhood(BaseModel):
    """Multi-hop neighborhood around a central concept"""

    central_concept: str
    immediate_neighbors: list[RelatedConcept] = Field(default_factory=list)
    extended_neighbors: list[RelatedConcept] = Field(default_factory=list)
    neighborhood_clusters: list[list[str]] = Field(default_factory=list)
    bridge_concepts: list[str] = Field(default_factory=list)
    pathways: list[ConceptPath] = Field(default_factory=list)


class BridgeRequest(BaseModel):
    """Request model for bridge concept discovery"""

    concepts: list[str]


# ========================================
# GRAPH MODELS
# ========================================


NODE_TYPES = Literal["tag", "category", "ontology", "bridge"]

CLUSTER_TYPES = Literal["semantic", "hierarchical", "categorical"]


class ConceptNode(BaseModel):
    """Node in the relationship graph"""

    concept: str
    type: NODE_TYPES
    weight: float = 1.0
    collections: list[str] = Field(default_factory=list)


class ConceptEdge(BaseModel):
    """Edge in the relationship graph"""

    source: str
    target: str
    relationship: str
    weight: float
    bidirectional: bool = False


class ConceptCluster(BaseModel):
    """Connected group of concepts in the relationship graph"""

    id: str
    concepts: list[str]
    cluster_type: CLUSTER_TYPES
    centroid: str


class RelationshipGraph(BaseModel):
    """Full graph data for visualization"""

    nodes: list[ConceptNode] = Field(default_factory=list)
    edges: list[ConceptEdge] = Field(default_factory=list)
    clusters: list[ConceptCluster] = Field(default_factory=list)
    centrality: dict[str, float] = Field(default_factory=dict)


class GraphRequest(BaseModel):
    """Request model for building a relationship graph"""

    concepts: list[str]
    max_nodes: int = Field(default=50, ge=1, le=500)
