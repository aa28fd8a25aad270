"""Record store collaborator: interface plus in-memory and SQLite backends."""

from commandcenter.store.base import RecordStore, RecordStoreError
from commandcenter.store.memory import InMemoryStore
from commandcenter.store.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "RecordStore", "RecordStoreError", "SQLiteStore"]
