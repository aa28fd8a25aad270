"""Public API layer."""

from commandcenter.api.facade import CommandCenter, CommandOutcome

__all__ = ["CommandCenter", "CommandOutcome"]
