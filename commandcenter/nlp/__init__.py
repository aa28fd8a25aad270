"""Command parser — convert plain-English estimating commands to typed actions."""

from commandcenter.nlp.parser import HELP_TEXT, CommandParser, capabilities, parse_command
from commandcenter.nlp.schema import Action, ActionType, CommandContext, ParseResult

__all__ = [
    "Action",
    "ActionType",
    "CommandContext",
    "CommandParser",
    "HELP_TEXT",
    "ParseResult",
    "capabilities",
    "parse_command",
]
