"""Persisted scan session (ordered list of scanned items)."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from ..models import NormalizedItem, QuantityEntry, ScannedItem
from .store import SCANNED_ITEMS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return uuid.uuid4().hex


class SessionStore:
    """Reads and writes the session as one JSON array.

    Every mutation replaces the stored array wholesale.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def items(self) -> list[ScannedItem]:
        """Return all scanned items in scan order."""
        raw = self._store.get(SCANNED_ITEMS_KEY, [])
        return [ScannedItem.from_dict(d) for d in raw]

    def _write(self, items: list[ScannedItem]) -> None:
        self._store.set(SCANNED_ITEMS_KEY, [i.to_dict() for i in items])

    def add(
        self,
        item: NormalizedItem,
        quantities: list[QuantityEntry],
        scanned_barcode: str = "",
    ) -> ScannedItem:
        """Append a new item stamped with an id and scan date.

        Raises:
            ValueError: If ``quantities`` is empty.
        """
        if not quantities:
            raise ValueError("A scanned item needs at least one quantity entry")

        items = self.items()
        scanned = ScannedItem(
            id=generate_id(),
            scan_date=datetime.now(timezone.utc).isoformat(),
            item=item,
            quantities=list(quantities),
            scanned_barcode=scanned_barcode,
        )
        items.append(scanned)
        self._write(items)
        logger.info(
            "Saved item %s (%d quantities)", item.item_code, len(quantities)
        )
        return scanned

    def remove(self, item_id: str) -> list[ScannedItem]:
        """Remove the item with ``item_id`` and return the remaining items."""
        items = self.items()
        remaining = [i for i in items if i.id != item_id]
        if len(remaining) != len(items):
            self._write(remaining)
            logger.info("Removed item %s", item_id)
        return remaining

    def clear(self) -> None:
        self._store.delete(SCANNED_ITEMS_KEY)
        logger.info("Cleared scan session")
