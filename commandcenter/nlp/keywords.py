"""Keyword tables — category, trade, project type and assembly inference.

Each table is checked top to bottom; the first row with a matching
keyword wins.
"""

from __future__ import annotations

import re

from commandcenter.config import DEFAULT_PROJECT_TYPE

_CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Drywall", ("drywall", "sheetrock")),
    ("Framing", ("stud", "plate", "framing")),
    ("Insulation", ("insulation", "r-")),
    ("Paint", ("paint", "primer")),
    ("Electrical", ("electrical", "wire", "outlet", "switch")),
    ("Plumbing", ("plumb", "pipe", "drain")),
    ("HVAC", ("hvac", "duct")),
    ("Flooring", ("floor", "tile", "carpet")),
    ("Doors", ("door",)),
    ("Windows", ("window",)),
    ("Trim", ("trim", "molding", "baseboard")),
    ("Roofing", ("roof", "shingle")),
    ("Siding", ("siding",)),
    ("Concrete", ("concrete", "cement")),
)

_TRADE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Drywall", ("drywall", "tape", "mud")),
    ("Framing", ("frame", "framing", "stud", "carpent")),
    ("Electrical", ("electric", "wire")),
    ("Plumbing", ("plumb", "pipe")),
    ("Paint", ("paint",)),
    ("HVAC", ("hvac", "duct")),
)

_PROJECT_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("basement_finish", ("basement",)),
    ("deck", ("deck",)),
    ("roofing", ("roof",)),
    ("siding", ("siding",)),
    ("kitchen_remodel", ("kitchen",)),
    ("bathroom_remodel", ("bath",)),
)

_ASSEMBLY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("framing", ("framing", "frame")),
    ("drywall", ("drywall", "sheetrock")),
    ("electrical", ("electrical", "electric")),
    ("plumbing", ("plumb",)),
    ("insulation", ("insulation",)),
    ("paint", ("paint",)),
    ("trim", ("trim",)),
    ("flooring", ("flooring", "floor")),
    ("hvac", ("hvac",)),
    ("doors", ("door",)),
    ("windows", ("window",)),
    ("deck", ("deck",)),
    ("roofing", ("roof",)),
    ("siding", ("siding",)),
)

_ASSEMBLY_SPLIT_RE = re.compile(r"[,+&]|\s+and\s+|\s+with\s+")


def _first_match(
    text: str,
    table: tuple[tuple[str, tuple[str, ...]], ...],
) -> str | None:
    lower = text.lower()
    for label, keywords in table:
        if any(k in lower for k in keywords):
            return label
    return None


def infer_category(description: str) -> str:
    """Return the takeoff category for a free-text item description."""
    return _first_match(description, _CATEGORY_KEYWORDS) or "General"


def infer_trade(task_name: str) -> str:
    """Return the labor trade for a free-text task name."""
    return _first_match(task_name, _TRADE_KEYWORDS) or "General"


def infer_project_type(text: str) -> str:
    """Guess the project type from the command text."""
    return _first_match(text, _PROJECT_TYPE_KEYWORDS) or DEFAULT_PROJECT_TYPE


def extract_assembly_names(text: str) -> list[str]:
    """Return the deduplicated assembly keywords in a ``framing + drywall`` list.

    Each separated part contributes at most one keyword.
    """
    names: list[str] = []
    for part in _ASSEMBLY_SPLIT_RE.split(text.lower()):
        part = part.strip()
        if not part:
            continue
        name = _first_match(part, _ASSEMBLY_KEYWORDS)
        if name is not None and name not in names:
            names.append(name)
    return names
