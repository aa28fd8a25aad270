"""In-process record store for tests and single-session use."""

from __future__ import annotations

import copy
from typing import Any

from commandcenter.models.records import new_id
from commandcenter.store.base import RecordStore, RecordStoreError, matches


class InMemoryStore(RecordStore):
    """Dict-of-dicts store.  Every read and write works on deep copies."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _table(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        table = self._table(collection)
        stored = copy.deepcopy(record)
        stored.setdefault("id", new_id())
        if stored["id"] in table:
            raise RecordStoreError(
                f'duplicate key value violates unique constraint "{collection}_pkey"'
            )
        table[stored["id"]] = stored
        return copy.deepcopy(stored)

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        record = self._table(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def update(
        self, collection: str, record_id: str, changes: dict[str, Any],
    ) -> dict[str, Any]:
        table = self._table(collection)
        if record_id not in table:
            raise RecordStoreError(f"{collection} record {record_id} not found")
        table[record_id].update(copy.deepcopy(changes))
        return copy.deepcopy(table[record_id])

    def delete(self, collection: str, record_id: str) -> dict[str, Any] | None:
        return self._table(collection).pop(record_id, None)

    def list(
        self,
        collection: str,
        project_id: str | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(r) for r in self._table(collection).values()
            if matches(r, project_id, filters)
        ]

    def count(self, collection: str) -> int:
        return len(self._table(collection))
