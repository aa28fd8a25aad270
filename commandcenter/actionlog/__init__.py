"""Action log — append-only, versioned audit of executed command batches."""

from commandcenter.actionlog.log import (
    ActionLog,
    ActionLogEntry,
    ActionsEnvelope,
    InvalidTransition,
    LogStatus,
    UndoRecord,
)

__all__ = [
    "ActionLog",
    "ActionLogEntry",
    "ActionsEnvelope",
    "InvalidTransition",
    "LogStatus",
    "UndoRecord",
]
