"""SQLite-backed local storage for the catalog and the scan session."""

from .catalog import CatalogLockedError, CatalogStore
from .schema import ensure_schema
from .session import SessionStore
from .store import KeyValueStore

__all__ = [
    "CatalogLockedError",
    "CatalogStore",
    "KeyValueStore",
    "SessionStore",
    "ensure_schema",
]
