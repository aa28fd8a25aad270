"""Uniform result shapes returned by the executor."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ExecutionResult(BaseModel):
    """Outcome of one action, or of an undo.

    ``message`` is always human-readable, on failure too.  ``undo_data``
    may only be set when ``undoable`` is true.
    """

    success: bool
    action_type: str
    message: str
    data: Optional[dict[str, Any]] = None
    undoable: bool = False
    undo_data: Optional[dict[str, Any]] = None
    navigate_to: Optional[str] = None

    @model_validator(mode="after")
    def _undo_data_requires_undoable(self) -> ExecutionResult:
        if self.undo_data is not None and not self.undoable:
            raise ValueError("undo_data is only allowed on undoable results")
        return self

    @classmethod
    def failure(cls, action_type: str, message: str) -> ExecutionResult:
        return cls(success=False, action_type=action_type, message=message)


class BatchResult(BaseModel):
    """Every action's result plus the id of the batch's log entry."""

    results: list[ExecutionResult] = Field(default_factory=list)
    log_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return bool(self.results) and all(r.success for r in self.results)

    @property
    def first_error(self) -> str | None:
        return next((r.message for r in self.results if not r.success), None)
