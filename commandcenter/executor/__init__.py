"""Command executor: dispatch, action logging and undo."""

from commandcenter.executor.context import ExecutionContext
from commandcenter.executor.engine import CommandExecutor
from commandcenter.executor.handlers import HANDLERS, PreconditionFailed
from commandcenter.executor.results import BatchResult, ExecutionResult
from commandcenter.executor.sanitize import coerce_price

__all__ = [
    "BatchResult",
    "CommandExecutor",
    "ExecutionContext",
    "ExecutionResult",
    "HANDLERS",
    "PreconditionFailed",
    "coerce_price",
]
