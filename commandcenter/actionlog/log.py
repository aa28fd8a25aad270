"""ActionLog — append-only, versioned record of executed command batches backed by SQLite.

Each entry embeds the schema and parser versions that produced it, so
entries written by older parsers stay replayable.  The only mutation an
entry ever sees is the ``applied`` → ``undone`` status transition.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from commandcenter.config import PARSER_VERSION, SCHEMA_VERSION

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS action_log (
    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
    id           TEXT    NOT NULL UNIQUE,
    project_id   TEXT,
    source       TEXT    NOT NULL DEFAULT '',
    command_text TEXT    NOT NULL DEFAULT '',
    actions_json TEXT    NOT NULL,
    status       TEXT    NOT NULL,
    error        TEXT,
    undoable     INTEGER NOT NULL DEFAULT 0,
    undo_data    TEXT,
    created_at   TEXT    NOT NULL
);
"""

_COLUMNS = (
    "id, project_id, source, command_text, actions_json, status, "
    "error, undoable, undo_data, created_at"
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InvalidTransition(Exception):
    """Raised when a log entry's status cannot move to the requested state."""


class LogStatus(str, Enum):
    APPLIED = "applied"
    FAILED = "failed"
    UNDONE = "undone"


class UndoRecord(BaseModel):
    """One action's undo payload, tagged with the action kind that produced it."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class ActionsEnvelope(BaseModel):
    schema_version: int = SCHEMA_VERSION
    parser_version: str = PARSER_VERSION
    executed_at: str = Field(default_factory=_utc_now)
    actions: list[dict[str, Any]] = Field(default_factory=list)


class ActionLogEntry(BaseModel):
    """A single executed batch."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    project_id: Optional[str] = None
    source: str = ""
    command_text: str = ""
    actions_json: ActionsEnvelope = Field(default_factory=ActionsEnvelope)
    status: LogStatus = LogStatus.APPLIED
    error: Optional[str] = None
    undoable: bool = False
    undo_data: Optional[list[UndoRecord]] = None
    created_at: str = Field(default_factory=_utc_now)


class ActionLog:
    """Append-only action log stored in SQLite.

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

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, entry: ActionLogEntry) -> ActionLogEntry:
        """Persist a new entry and return it."""
        undo_data = (
            json.dumps([u.model_dump() for u in entry.undo_data])
            if entry.undo_data is not None else None
        )
        self._conn.execute(
            f"INSERT INTO action_log ({_COLUMNS}) VALUES (?,?,?,?,?,?,?,?,?,?)",
            (
                entry.id,
                entry.project_id,
                entry.source,
                entry.command_text,
                entry.actions_json.model_dump_json(),
                entry.status.value,
                entry.error,
                int(entry.undoable),
                undo_data,
                entry.created_at,
            ),
        )
        self._conn.commit()
        logger.info(
            "Logged batch %s (%s, %d action(s))",
            entry.id, entry.status.value, len(entry.actions_json.actions),
        )
        return entry

    def get(self, log_id: str) -> ActionLogEntry | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM action_log WHERE id = ?", (log_id,),
        ).fetchone()
        return self._row_to_entry(row) if row else None

    def mark_undone(self, log_id: str) -> ActionLogEntry:
        """Move an ``applied`` entry to ``undone``.

        Raises
        ------
        InvalidTransition
            If the entry does not exist or is not ``applied``.
        """
        cur = self._conn.execute(
            "UPDATE action_log SET status = ? WHERE id = ? AND status = ?",
            (LogStatus.UNDONE.value, log_id, LogStatus.APPLIED.value),
        )
        self._conn.commit()
        if cur.rowcount != 1:
            entry = self.get(log_id)
            state = entry.status.value if entry else "missing"
            raise InvalidTransition(f"Cannot undo action log {log_id} ({state})")
        entry = self.get(log_id)
        assert entry is not None
        return entry

    def list(
        self,
        project_id: str | None = None,
        limit: int | None = None,
    ) -> list[ActionLogEntry]:
        """Return entries newest first, optionally for one project."""
        sql = f"SELECT {_COLUMNS} FROM action_log"
        params: list[Any] = []
        if project_id is not None:
            sql += " WHERE project_id = ?"
            params.append(project_id)
        sql += " ORDER BY seq DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        rows = self._conn.execute(sql, params).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_entry(row: tuple[Any, ...]) -> ActionLogEntry:
        (
            log_id, project_id, source, command_text, actions_json,
            status, error, undoable, undo_data, created_at,
        ) = row
        return ActionLogEntry(
            id=log_id,
            project_id=project_id,
            source=source,
            command_text=command_text,
            actions_json=ActionsEnvelope.model_validate_json(actions_json),
            status=LogStatus(status),
            error=error,
            undoable=bool(undoable),
            undo_data=json.loads(undo_data) if undo_data is not None else None,
            created_at=created_at,
        )
