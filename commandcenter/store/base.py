"""Abstract record-store interface."""

from __future__ import annotations

import abc
from typing import Any


class RecordStoreError(Exception):
    """Raised when the backing store rejects an operation.

    The message is shown to the user unchanged.
    """


class RecordStore(abc.ABC):
    """Minimal CRUD surface the executor relies on.

    Records are plain dicts carrying an ``id``.  ``list`` returns
    records in insertion order.  Implementations never span a
    transaction across several records.
    """

    @abc.abstractmethod
    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Store *record* and return the stored copy.

        Raises :class:`RecordStoreError` if the id is already taken.
        """

    @abc.abstractmethod
    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return a copy of the record, or *None*."""

    @abc.abstractmethod
    def update(
        self, collection: str, record_id: str, changes: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge *changes* into a record and return the updated copy.

        Raises :class:`RecordStoreError` if the record does not exist.
        """

    @abc.abstractmethod
    def delete(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Remove a record and return it, or *None* if it was absent."""

    @abc.abstractmethod
    def list(
        self,
        collection: str,
        project_id: str | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """Return records matching *project_id* and every equality filter."""


def matches(record: dict[str, Any], project_id: str | None, filters: dict[str, Any]) -> bool:
    if project_id is not None and record.get("project_id") != project_id:
        return False
    return all(record.get(k) == v for k, v in filters.items())
