"""
Concept Discovery API Router

Endpoints for related concept discovery, neighborhood exploration, paths,
relationship graphs, and registry maintenance.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from conceptgraph.models.discovery_models import (
    REGISTRY_NAMES,
    BridgeRequest,
    ConceptBulkCreate,
    ConceptCreate,
    ConceptNeighborhood,
    ConceptPath,
    ConceptRelationships,
    GraphRequest,
    MetadataConceptsCreate,
    RegistrySearchResponse,
    RelationshipGraph,
    SaveSummary,
)
from conceptgraph.services.discovery.bridge_finder import get_bridge_finder
from conceptgraph.services.discovery.concept_normalizer import (
    normalize_concept,
    validate_concept,
)
from conceptgraph.services.discovery.concept_writer import get_concept_writer
from conceptgraph.services.discovery.neighborhood_explorer import (
    get_neighborhood_explorer,
)
from conceptgraph.services.discovery.path_finder import get_path_finder
from conceptgraph.services.discovery.registry_search import get_registry_search
from conceptgraph.services.discovery.relationship_discovery import (
    get_relationship_discovery,
)
from conceptgraph.services.discovery.relationship_graph import (
    get_relationship_graph_builder,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/concepts", tags=["concepts"])


# ========================================
# DISCOVERY
# ========================================


@router.get("/discover", response_model=ConceptRelationships)
async def discover_related_concepts(
    concept: str = Query(..., description="Concept to discover relationships for"),
) -> ConceptRelationships:
    """
    Discover concepts related to a concept across the tags, categories,
    and ontology registries.
    """
    return await get_relationship_discovery().discover(concept)


@router.get("/neighborhood", response_model=ConceptNeighborhood)
async def explore_neighborhood(
    concept: str = Query(..., description="Central concept"),
    depth: int = Query(2, ge=1, le=3, description="Exploration depth"),
) -> ConceptNeighborhood:
    """Explore the conceptual neighborhood around a concept."""
    return await get_neighborhood_explorer().explore(concept, depth)


@router.get("/path", response_model=ConceptPath)
async def find_path(
    start: str = Query(..., description="Start concept"),
    end: str = Query(..., description="End concept"),
    max_depth: int = Query(3, ge=1, le=5, description="Maximum path size"),
) -> ConceptPath:
    """
    Find the shortest path between two concepts.

    Returns 404 when the end concept is not reachable within max_depth.
    """
    path = await get_path_finder().shortest_path(start, end, max_depth)
    if path is None:
        raise HTTPException(
            status_code=404,
            detail=f"No path from '{start}' to '{end}' within depth {max_depth}",
        )
    return path


@router.post("/bridges", response_model=list[str])
async def find_bridge_concepts(request: BridgeRequest) -> list[str]:
    """
    Find concepts that bridge the given concepts.

    Cost grows with the square of the number of concepts; keep the list short.
    """
    return await get_bridge_finder().find_bridges(request.concepts)


@router.post("/graph", response_model=RelationshipGraph)
async def build_relationship_graph(request: GraphRequest) -> RelationshipGraph:
    """Build a relationship graph over a set of concepts."""
    return await get_relationship_graph_builder().build_graph(
        request.concepts, request.max_nodes
    )


# ========================================
# REGISTRIES
# ========================================


@router.get("/registries/{registry}/search", response_model=RegistrySearchResponse)
async def search_registry(
    registry: REGISTRY_NAMES,
    prefix: str = Query(..., description="Concept prefix"),
    limit: int | None = Query(None, ge=1, le=500, description="Maximum results"),
) -> RegistrySearchResponse:
    """Search a registry for concepts starting with a prefix."""
    normalized = normalize_concept(prefix)
    concepts = await get_registry_search().search(registry, normalized, limit)
    return RegistrySearchResponse(registry=registry, prefix=normalized, concepts=concepts)


@router.get("/registries/{registry}", response_model=list[str])
async def list_registry(registry: REGISTRY_NAMES) -> list[str]:
    """Get all concepts in a registry."""
    return await get_concept_writer().list_all(registry)


@router.get("/registries/{registry}/exists")
async def concept_exists(
    registry: REGISTRY_NAMES,
    concept: str = Query(..., description="Concept to check"),
) -> dict:
    """Check whether a concept exists in a registry."""
    exists = await get_concept_writer().exists(registry, concept)
    return {"registry": registry, "concept": normalize_concept(concept), "exists": exists}


@router.post("/registries/{registry}")
async def add_concept(registry: REGISTRY_NAMES, request: ConceptCreate) -> dict:
    """
    Add a concept to a registry if it doesn't already exist.

    Returns 400 for invalid concept names.
    """
    validation = validate_concept(request.name)
    if not validation.is_valid:
        raise HTTPException(status_code=400, detail=validation.message)

    success = await get_concept_writer().upsert_if_absent(registry, request.name)
    if not success:
        raise HTTPException(
            status_code=500, detail=f"Failed to save concept '{request.name}'"
        )

    logger.info(f"Concept '{request.name}' saved to {registry}")
    return {
        "success": True,
        "registry": registry,
        "concept": normalize_concept(request.name),
    }


@router.post("/registries/{registry}/bulk", response_model=SaveSummary)
async def add_concepts(registry: REGISTRY_NAMES, request: ConceptBulkCreate) -> SaveSummary:
    """Save a comma-separated list of concepts to a registry."""
    return await get_concept_writer().save_from_string(registry, request.names)


@router.post("/registries/ontology/metadata", response_model=SaveSummary)
async def add_metadata_concepts(request: MetadataConceptsCreate) -> SaveSummary:
    """
    Save the concepts named in isA / childOf / hasA metadata values to the
    ontology registry. Each value may itself be comma-separated.
    """
    return await get_concept_writer().save_metadata_concepts(request.fields)
