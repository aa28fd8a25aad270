"""SQLiteStore — durable record store, one JSON document per row."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from commandcenter.models.records import new_id
from commandcenter.store.base import RecordStore, RecordStoreError, matches

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS records (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    collection  TEXT    NOT NULL,
    id          TEXT    NOT NULL,
    project_id  TEXT,
    data        TEXT    NOT NULL,
    UNIQUE (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_records_project ON records (collection, project_id);
"""


class SQLiteStore(RecordStore):
    """Record store backed by a single SQLite table.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Defaults to ``':memory:'``.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn = sqlite3.connect(self._db_path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> list[tuple[Any, ...]]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
            self._conn.commit()
            return rows
        except sqlite3.Error as exc:
            self._conn.rollback()
            logger.warning("Record store error: %s", exc)
            raise RecordStoreError(str(exc)) from exc

    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        stored = dict(record)
        stored.setdefault("id", new_id())
        self._execute(
            "INSERT INTO records (collection, id, project_id, data) VALUES (?,?,?,?)",
            (collection, stored["id"], stored.get("project_id"), json.dumps(stored)),
        )
        return stored

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        rows = self._execute(
            "SELECT data FROM records WHERE collection = ? AND id = ?",
            (collection, record_id),
        )
        return json.loads(rows[0][0]) if rows else None

    def update(
        self, collection: str, record_id: str, changes: dict[str, Any],
    ) -> dict[str, Any]:
        current = self.get(collection, record_id)
        if current is None:
            raise RecordStoreError(f"{collection} record {record_id} not found")
        current.update(changes)
        self._execute(
            "UPDATE records SET data = ?, project_id = ? WHERE collection = ? AND id = ?",
            (json.dumps(current), current.get("project_id"), collection, record_id),
        )
        return current

    def delete(self, collection: str, record_id: str) -> dict[str, Any] | None:
        current = self.get(collection, record_id)
        if current is None:
            return None
        self._execute(
            "DELETE FROM records WHERE collection = ? AND id = ?",
            (collection, record_id),
        )
        return current

    def list(
        self,
        collection: str,
        project_id: str | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        if project_id is None:
            rows = self._execute(
                "SELECT data FROM records WHERE collection = ? ORDER BY seq",
                (collection,),
            )
        else:
            rows = self._execute(
                "SELECT data FROM records WHERE collection = ? AND project_id = ? ORDER BY seq",
                (collection, project_id),
            )
        records = [json.loads(r[0]) for r in rows]
        return [r for r in records if matches(r, None, filters)]

    def close(self) -> None:
        self._conn.close()
