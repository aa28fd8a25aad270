"""CommandParser — main entry point for command parsing.

Usage::

    from commandcenter.nlp import CommandParser

    parser = CommandParser()
    result = parser.parse("add drywall 1050 sf at $12.99")
"""

from __future__ import annotations

import logging
from typing import Any

from commandcenter.nlp.detectors import DEFAULT_DETECTORS, Detector
from commandcenter.nlp.schema import ActionType, CommandContext, ParseResult

logger = logging.getLogger(__name__)

# (action kind, title, example commands)
CAPABILITIES: tuple[tuple[ActionType, str, tuple[str, ...]], ...] = (
    (ActionType.PROJECT_CREATE, "Create a project",
     ("create project Smith Basement address 12 Elm St",)),
    (ActionType.PROJECT_SET_DEFAULTS, "Set project defaults",
     ("tax 7 markup 20 burden 35", "set waste 10%")),
    (ActionType.TAKEOFF_ADD_ITEM, "Add a takeoff item",
     ("add drywall 1050 sf at $12.99",)),
    (ActionType.TAKEOFF_ADD_MULTIPLE, "Add several takeoff items",
     ("add studs 120 ea at $4.25; drywall 40 sheets at $14",)),
    (ActionType.TAKEOFF_UPDATE_ITEM, "Change a takeoff item",
     ("update item #3f9c2a quantity 1200",)),
    (ActionType.TAKEOFF_DELETE_ITEMS, "Delete takeoff items",
     ("delete item #3f9c2a",)),
    (ActionType.TAKEOFF_GENERATE_DRAFTS, "Draft items from assemblies",
     ("generate drafts using framing + drywall, walls 150 lf, ceiling 8 ft",)),
    (ActionType.TAKEOFF_PROMOTE_DRAFTS, "Promote drafts", ("promote all drafts",)),
    (ActionType.TAKEOFF_DELETE_DRAFTS, "Delete drafts", ("delete all drafts",)),
    (ActionType.TAKEOFF_PRICE_ITEMS, "Look up material prices",
     ("price unpriced items", "look up prices zip 02903")),
    (ActionType.LABOR_ADD_TASK_LINE, "Add a labor task",
     ("add task framing 100 hr at $45",)),
    (ActionType.EXPORT_PDF, "Export the estimate as PDF", ("export pdf",)),
    (ActionType.EXPORT_CSV, "Export a CSV",
     ("export takeoff csv", "export labor csv")),
    (ActionType.QA_SHOW_ISSUES, "Show QA issues", ("show issues",)),
    (ActionType.PLANS_OPEN, "Open a plan sheet", ("open plan A-101.pdf",)),
    (ActionType.SYSTEM_CAPABILITIES, "List what commands are understood", ("help",)),
)


def capabilities() -> list[dict[str, Any]]:
    """Return the command catalogue as plain dicts."""
    return [
        {"action": kind.value, "title": title, "examples": list(examples)}
        for kind, title, examples in CAPABILITIES
    ]


def _build_help_text() -> str:
    lines = ["I didn't understand that command. Try one of these:"]
    for _, _, examples in CAPABILITIES:
        lines.append(f'  - "{examples[0]}"')
    return "\n".join(lines)


HELP_TEXT = _build_help_text()


class CommandParser:
    """Rule-based parser that turns one command into typed actions.

    Parameters
    ----------
    detectors:
        Ordered detector functions.  Defaults to
        :data:`~commandcenter.nlp.detectors.DEFAULT_DETECTORS`.  Order
        decides action order and which clarifying question wins.
    """

    def __init__(self, detectors: tuple[Detector, ...] | None = None) -> None:
        self._detectors = tuple(detectors) if detectors is not None else DEFAULT_DETECTORS

    def parse(
        self,
        text: str,
        context: CommandContext | dict[str, Any] | None = None,
    ) -> ParseResult:
        """Parse a plain-English command.

        Parameters
        ----------
        text:
            The user's command.
        context:
            Optional active project id and type.

        Returns
        -------
        ParseResult
            ``success`` with actions; otherwise a clarifying
            ``missing_info`` question or help text in ``error``.
        """
        if context is None:
            ctx = CommandContext()
        elif isinstance(context, CommandContext):
            ctx = context
        else:
            ctx = CommandContext.model_validate(context)

        lower = text.strip().lower()
        if not lower:
            return ParseResult(success=False, error=HELP_TEXT)

        actions = []
        for detector in self._detectors:
            detection = detector(lower, ctx)
            if detection.missing_info is not None:
                logger.debug("%s needs more detail: %s", detector.__name__, detection.missing_info)
                return ParseResult(success=False, missing_info=detection.missing_info)
            actions.extend(detection.actions)

        if not actions:
            logger.debug("No command recognised in: %s", lower[:80])
            return ParseResult(success=False, error=HELP_TEXT)

        logger.debug(
            "Parsed %d action(s): %s", len(actions), ", ".join(a.type.value for a in actions),
        )
        return ParseResult(success=True, actions=actions)


_default_parser = CommandParser()


def parse_command(
    text: str,
    context: CommandContext | dict[str, Any] | None = None,
) -> ParseResult:
    """Parse *text* with the default detector set."""
    return _default_parser.parse(text, context)
