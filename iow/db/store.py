"""Key/value storage of JSON blobs on top of SQLite."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .schema import ensure_schema

logger = logging.getLogger(__name__)

MASTER_DATA_KEY = "master_data"
SCANNED_ITEMS_KEY = "scanned_items"
FILE_LOCKED_KEY = "file_locked"
WAREHOUSE_NAME_KEY = "warehouse_name"


class KeyValueStore:
    """Stores one JSON document per key in the ``kv_store`` table."""

    def __init__(self, db_path: str | Path = "~/.config/iow/iow.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for ``key``, or ``default``."""
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value,
                   updated_at = datetime('now', 'localtime')""",
            (key, json.dumps(value, ensure_ascii=False, default=str)),
        )
        conn.commit()
        logger.debug("Stored key %s", key)

    def delete(self, *keys: str) -> None:
        conn = self._get_conn()
        conn.executemany(
            "DELETE FROM kv_store WHERE key = ?", [(k,) for k in keys]
        )
        conn.commit()

    def set_many(self, values: dict[str, Any]) -> None:
        """Write several keys in a single transaction."""
        conn = self._get_conn()
        with conn:
            conn.executemany(
                """INSERT INTO kv_store (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = datetime('now', 'localtime')""",
                [
                    (k, json.dumps(v, ensure_ascii=False, default=str))
                    for k, v in values.items()
                ],
            )
