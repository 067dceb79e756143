"""Persisted master catalog, warehouse name and lock state."""

from __future__ import annotations

import hmac
import logging

from ..config import DEFAULT_WAREHOUSE
from .store import (
    FILE_LOCKED_KEY,
    MASTER_DATA_KEY,
    WAREHOUSE_NAME_KEY,
    KeyValueStore,
)

logger = logging.getLogger(__name__)


class CatalogLockedError(Exception):
    """The stored catalog is locked and can't be replaced."""


class CatalogStore:
    """Stores the loaded catalog rows together with its lock state.

    Loading a catalog locks it. Replacing it requires :meth:`unlock` with
    the configured secret, which also discards the stored catalog.
    """

    def __init__(
        self, store: KeyValueStore, default_warehouse: str = DEFAULT_WAREHOUSE
    ) -> None:
        self._store = store
        self._default_warehouse = default_warehouse or DEFAULT_WAREHOUSE

    def rows(self) -> list[dict] | None:
        return self._store.get(MASTER_DATA_KEY)

    def warehouse_name(self) -> str:
        return self._store.get(WAREHOUSE_NAME_KEY) or self._default_warehouse

    def is_locked(self) -> bool:
        return bool(self._store.get(FILE_LOCKED_KEY, False))

    def save(self, rows: list[dict], warehouse_name: str = "") -> None:
        """Store ``rows`` as the catalog and lock it.

        Raises:
            CatalogLockedError: If a locked catalog is already stored.
        """
        if self.is_locked() and self.rows() is not None:
            raise CatalogLockedError(
                "A catalog is already loaded. Unlock it before loading a new file."
            )
        values: dict = {MASTER_DATA_KEY: rows, FILE_LOCKED_KEY: True}
        if warehouse_name:
            values[WAREHOUSE_NAME_KEY] = warehouse_name
        self._store.set_many(values)
        logger.info(
            "Loaded catalog with %d rows for %s",
            len(rows),
            warehouse_name or self._default_warehouse,
        )

    def unlock(self, password: str, secret: str) -> bool:
        """Unlock and discard the stored catalog if ``password`` matches.

        An empty ``secret`` never unlocks.
        """
        if not secret or not hmac.compare_digest(
            password.encode("utf-8"), secret.encode("utf-8")
        ):
            logger.warning("Catalog unlock refused")
            return False
        self.clear()
        logger.info("Catalog unlocked")
        return True

    def clear(self) -> None:
        self._store.delete(MASTER_DATA_KEY, FILE_LOCKED_KEY, WAREHOUSE_NAME_KEY)
