"""
Concept Discovery Services Module

This module provides the concept relationship discovery services:
- Prefix search across the tags, categories, and ontology registries
- Related concept discovery with confidence scoring
- Bridge concepts, neighborhoods, and shortest paths
- Relationship graphs with centrality and clusters
"""

from .bridge_finder import BridgeFinder, get_bridge_finder
from .concept_writer import ConceptWriter, get_concept_writer
from .neighborhood_explorer import NeighborhoodExplorer, get_neighborhood_explorer
from .path_finder import PathFinder, get_path_finder
from .registry_database import ConceptRegistryDatabase, get_registry_database
from .registry_search import RegistrySearch, get_registry_search
from .relationship_discovery import RelationshipDiscovery, get_relationship_discovery
from .relationship_graph import (
    RelationshipGraphBuilder,
    get_relationship_graph_builder,
)

__all__ = [
    "ConceptRegistryDatabase",
    "get_registry_database",
    "RegistrySearch",
    "get_registry_search",
    "RelationshipDiscovery",
    "get_relationship_discovery",
    "BridgeFinder",
    "get_bridge_finder",
    "PathFinder",
    "get_path_finder",
    "NeighborhoodExplorer",
    "get_neighborhood_explorer",
    "RelationshipGraphBuilder",
    "get_relationship_graph_builder",
    "ConceptWriter",
    "get_concept_writer",
]
