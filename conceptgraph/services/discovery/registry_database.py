"""
Concept Registry Database Module

This module manages the concepts.db SQLite database holding the three
concept registries:
- tags (general keywords and descriptive metadata)
- categories (hierarchical classification: primary/secondary/reference)
- ontology (concepts that take part in isA / childOf / hasA relationships)

Each registry is a key-value table keyed by the normalized concept name.
"""

import logging
import os
import sqlite3
import threading
from typing import get_args

from conceptgraph.models.discovery_models import REGISTRY_NAMES

from .errors import RegistryUnavailable, UnknownRegistry

logger = logging.getLogger(__name__)

REGISTRIES: tuple[str, ...] = get_args(REGISTRY_NAMES)


class ConceptRegistryDatabase:
    """
    Database service for the concept registries.

    Provides prefix search, existence checks, and idempotent inserts.
    Storage errors are raised as RegistryUnavailable so callers can decide
    whether to degrade or report them.
    """

    def __init__(self, db_path: str = "data/concepts.db"):
        """
        Initialize the registry database.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_data_dir()
        self._init_database()

    def _ensure_data_dir(self) -> None:
        """Ensure the data directory exists for the database file."""
        data_dir = os.path.dirname(self.db_path)
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)

    def _init_database(self) -> None:
        """Initialize the database with one table per registry."""
        with sqlite3.connect(self.db_path) as conn:
            for registry in REGISTRIES:
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {registry} (
                        name TEXT PRIMARY KEY,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
            conn.commit()
            logger.info(f"Concept registry database initialized at {self.db_path}")

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def _check_registry(self, registry: str) -> str:
        if registry not in REGISTRIES:
            raise UnknownRegistry(f"Unknown registry: {registry}")
        return registry

    def search_prefix(
        self, registry: str, prefix: str, limit: int | None = None
    ) -> list[str]:
        """
        Find concepts whose name starts with the given prefix.

        Args:
            registry: Registry name (tags, categories, ontology)
            prefix: Normalized prefix to match
            limit: Maximum results (None for all)

        Returns:
            Matching names ordered lexicographically
        """
        table = self._check_registry(registry)
        if not prefix:
            return []

        # substr comparison is case-sensitive and has no wildcards, unlike LIKE
        sql = f"SELECT name FROM {table} WHERE substr(name, 1, ?) = ? ORDER BY name"
        params: list = [len(prefix), prefix]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        try:
            with self.get_connection() as conn:
                cursor = conn.execute(sql, params)
                return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise RegistryUnavailable(registry, str(e)) from e

    def exists(self, registry: str, name: str) -> bool:
        """Check whether a normalized concept is present in a registry."""
        table = self._check_registry(registry)
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(
                    f"SELECT 1 FROM {table} WHERE name = ?", (name,)
                )
                return cursor.fetchone() is not None
        except sqlite3.Error as e:
            raise RegistryUnavailable(registry, str(e)) from e

    def insert_if_absent(self, registry: str, name: str) -> bool:
        """
        Insert a normalized concept unless it already exists.

        Returns:
            True if a row was created, False if it was already present
        """
        table = self._check_registry(registry)
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(
                    f"INSERT OR IGNORE INTO {table} (name) VALUES (?)", (name,)
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise RegistryUnavailable(registry, str(e)) from e

    def list_all(self, registry: str) -> list[str]:
        """Get every concept in a registry, ordered by name."""
        table = self._check_registry(registry)
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(f"SELECT name FROM {table} ORDER BY name")
                return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise RegistryUnavailable(registry, str(e)) from e

    def count(self, registry: str) -> int:
        """Get the number of concepts in a registry."""
        table = self._check_registry(registry)
        try:
            with self.get_connection() as conn:
                return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        except sqlite3.Error as e:
            raise RegistryUnavailable(registry, str(e)) from e


# Global instance (lazy initialization with thread-safe double-checked locking)
_registry_database: ConceptRegistryDatabase | None = None
_singleton_lock = threading.Lock()


def get_registry_database() -> ConceptRegistryDatabase:
    """Get the global registry database instance (thread-safe)."""
    global _registry_database
    if _registry_database is None:
        with _singleton_lock:
            # Double-check after acquiring lock
            if _registry_database is None:
                _registry_database = ConceptRegistryDatabase()
    return _registry_database
