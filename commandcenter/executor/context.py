"""Per-invocation execution context."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ExecutionContext(BaseModel):
    """Who is running a command, and against which project."""

    project_id: Optional[str] = None
    project_type: Optional[str] = None
    user_id: Optional[str] = None
    source: str = "command_center"
    command_text: str = ""
    region: Optional[str] = None
