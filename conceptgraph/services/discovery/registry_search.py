"""
Registry Search Module

Async prefix search against the tags, categories, and ontology registries.
This is the only place the discovery services touch registry storage. Any
storage error is logged and turned into an empty result.
"""

import asyncio
import logging
import threading

from .registry_database import ConceptRegistryDatabase, get_registry_database

logger = logging.getLogger(__name__)


class RegistrySearch:
    """
    Prefix search over the concept registries.

    The backing store only needs a blocking
    ``search_prefix(registry, prefix, limit)`` method; calls run in a worker
    thread so the event loop is never blocked.
    """

    def __init__(self, db: ConceptRegistryDatabase | None = None):
        """
        Initialize the registry search adapter.

        Args:
            db: Registry storage (defaults to the global registry database)
        """
        self.db = db or get_registry_database()

    async def search(
        self, registry: str, prefix: str, limit: int | None = None
    ) -> list[str]:
        """
        Search one registry for concepts starting with prefix.

        Args:
            registry: Registry name (tags, categories, ontology)
            prefix: Normalized prefix
            limit: Maximum number of hits (None for all)

        Returns:
            Matching concepts ordered lexicographically, or [] on any error
        """
        if not prefix or not prefix.strip():
            return []

        try:
            results = await asyncio.to_thread(
                self.db.search_prefix, registry, prefix, limit
            )
        except Exception as e:
            logger.warning(f"Error searching {registry} with prefix '{prefix}': {e}")
            return []

        results = list(results or [])
        if limit is not None:
            results = results[:limit]
        logger.debug(f"{registry} search '{prefix}': {len(results)} hits")
        return results

    async def search_tags(self, prefix: str, limit: int | None = None) -> list[str]:
        """Search the tags registry."""
        return await self.search("tags", prefix, limit)

    async def search_categories(
        self, prefix: str, limit: int | None = None
    ) -> list[str]:
        """Search the categories registry."""
        return await self.search("categories", prefix, limit)

    async def search_ontology(
        self, prefix: str, limit: int | None = None
    ) -> list[str]:
        """Search the ontology registry."""
        return await self.search("ontology", prefix, limit)

    async def search_all(
        self, prefix: str, limit: int | None = None
    ) -> tuple[list[str], list[str], list[str]]:
        """
        Search all three registries concurrently.

        Returns:
            Tuple of (tags hits, categories hits, ontology hits)
        """
        tags, categories, ontology = await asyncio.gather(
            self.search_tags(prefix, limit),
            self.search_categories(prefix, limit),
            self.search_ontology(prefix, limit),
        )
        return tags, categories, ontology


# Global instance (lazy initialization with thread-safe double-checked locking)
_registry_search: RegistrySearch | None = None
_singleton_lock = threading.Lock()


def get_registry_search() -> RegistrySearch:
    """Get the global registry search instance (thread-safe)."""
    global _registry_search
    if _registry_search is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _registry_search is None:
                _registry_search = RegistrySearch()
    return _registry_search
