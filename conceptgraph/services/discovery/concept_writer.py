"""
Concept Writer Service Module

Persists new concept names into the registries. Writes are idempotent
upserts keyed by the normalized name, so concurrent duplicate saves are
harmless.
"""

import asyncio
import logging
import threading

from conceptgraph.models.discovery_models import SaveSummary

from .concept_normalizer import normalize_concept, parse_concept_list, validate_concept
from .errors import RegistryUnavailable, UnknownRegistry
from .registry_database import ConceptRegistryDatabase, get_registry_database

logger = logging.getLogger(__name__)


class ConceptWriter:
    """
    Service for saving concepts to the tags, categories, and ontology registries.

    Failures are reported as False / failure counts, never raised.
    """

    def __init__(self, db: ConceptRegistryDatabase | None = None):
        self.db = db or get_registry_database()

    async def upsert_if_absent(self, registry: str, name: str) -> bool:
        """
        Save a concept to a registry if it doesn't already exist.

        Args:
            registry: Registry name (tags, categories, ontology)
            name: Concept name to save

        Returns:
            True if the concept was created or already existed, False on error
        """
        validation = validate_concept(name)
        if not validation.is_valid:
            logger.error(f"Invalid concept '{name}': {validation.message}")
            return False

        normalized = normalize_concept(name)

        try:
            created = await asyncio.to_thread(
                self.db.insert_if_absent, registry, normalized
            )
        except (RegistryUnavailable, UnknownRegistry) as e:
            logger.error(f"Error saving concept '{normalized}' to {registry}: {e}")
            return False

        if created:
            logger.info(f"Saved new concept '{normalized}' to {registry}")
        return True

    async def exists(self, registry: str, name: str) -> bool:
        """Check whether a concept exists in a registry (False when invalid or on error)."""
        if not validate_concept(name).is_valid:
            return False

        try:
            return await asyncio.to_thread(
                self.db.exists, registry, normalize_concept(name)
            )
        except (RegistryUnavailable, UnknownRegistry) as e:
            logger.error(f"Error checking if concept '{name}' exists in {registry}: {e}")
            return False

    async def list_all(self, registry: str) -> list[str]:
        """Get all concepts in a registry ordered by name ([] on error)."""
        try:
            return await asyncio.to_thread(self.db.list_all, registry)
        except (RegistryUnavailable, UnknownRegistry) as e:
            logger.error(f"Error fetching all concepts from {registry}: {e}")
            return []

    async def save_from_string(self, registry: str, text: str | None) -> SaveSummary:
        """
        Save every concept in a comma-separated string concurrently.

        Args:
            registry: Registry name
            text: Comma-separated concept names, e.g. "foo, bar, baz"

        Returns:
            SaveSummary with requested, saved, and failed counts
        """
        names = parse_concept_list(text)
        if not names:
            return SaveSummary()

        results = await asyncio.gather(
            *(self.upsert_if_absent(registry, name) for name in names),
            return_exceptions=True,
        )
        saved = sum(1 for result in results if result is True)
        failed = len(names) - saved

        if failed:
            logger.warning(f"Failed to save {failed} of {len(names)} {registry} concepts")

        return SaveSummary(requested=len(names), saved=saved, failed=failed)

    async def save_metadata_concepts(self, metadata_fields: list[str]) -> SaveSummary:
        """
        Save ontology concepts from metadata fields (isA, childOf, hasA values).

        Each field may itself hold a comma-separated list.
        """
        combined = ", ".join(field for field in metadata_fields if field and field.strip())
        return await self.save_from_string("ontology", combined)


# Factory function with thread-safe singleton
_concept_writer: ConceptWriter | None = None
_singleton_lock = threading.Lock()


def get_concept_writer() -> ConceptWriter:
    """Get the global concept writer instance (thread-safe)."""
    global _concept_writer
    if _concept_writer is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _concept_writer is None:
                _concept_writer = ConceptWriter()
    return _concept_writer
