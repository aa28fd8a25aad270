"""Measurement-variable extraction from free text.

Turns phrases like ``"walls 150 lf, 8 ft ceilings, 4 doors"`` into a
variable binding map usable by assembly formulas.
"""

from __future__ import annotations

import re
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Display names for prompts and RFIs
# ---------------------------------------------------------------------------

VARIABLE_LABELS = MappingProxyType({
    "wall_lf": "Wall Linear Feet (LF)",
    "wall_sf": "Wall Square Feet (SF)",
    "ceiling_sf": "Ceiling Square Feet (SF)",
    "floor_sf": "Floor Square Feet (SF)",
    "soffit_lf": "Soffit/Bulkhead Linear Feet (LF)",
    "doors_count": "Number of Doors",
    "door_count": "Number of Doors",
    "windows_count": "Number of Windows",
    "window_count": "Number of Windows",
    "ceiling_height": "Ceiling Height (feet)",
    "room_count": "Number of Rooms",
    "room_perimeter": "Room Perimeter (LF)",
    "door_openings_lf": "Door Opening Width Total (LF)",
    "outside_corners": "Number of Outside Corners",
    "full_bath": "Full Bath Count",
    "half_bath": "Half Bath Count",
    "deck_sf": "Deck Square Feet",
    "post_count": "Number of Posts",
    "rail_lf": "Railing Linear Feet",
    "roof_squares": "Roof Squares",
    "siding_sf": "Siding Square Feet",
})

# ---------------------------------------------------------------------------
# Pattern library.  Order matters: the first hit for a variable wins.
# ---------------------------------------------------------------------------

_NUM = r"(\d+(?:\.\d+)?)"
_INT = r"(\d+)"
_LF = r"(?:lf|linear\s*feet|linear\s*ft|ft|feet|')"
_SF = r"(?:sf|sq\s*ft|sqft|square\s*feet)"

_PATTERNS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = tuple(
    (re.compile(regex), names)
    for regex, names in (
        # Walls
        (_NUM + r"\s*(?:linear\s*)?(?:feet|ft|lf|')\s*(?:of\s*)?(?:wall|framing)", ("wall_lf",)),
        (r"walls?\s*(?:are|is)?\s*" + _NUM + r"\s*(?:linear\s*)?(?:feet|ft|lf|')", ("wall_lf",)),
        (r"framing\s*" + _NUM + r"\s*(?:lf|linear\s*feet|ft)", ("wall_lf",)),
        # Square footage
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?drywall", ("wall_sf",)),
        (r"drywall\s*" + _NUM + r"\s*" + _SF, ("wall_sf",)),
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?walls?\b", ("wall_sf",)),
        (r"walls?\s*(?:are|is)?\s*" + _NUM + r"\s*" + _SF, ("wall_sf",)),
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?ceiling", ("ceiling_sf",)),
        (r"ceilings?\s*(?:are|is)?\s*" + _NUM + r"\s*" + _SF, ("ceiling_sf",)),
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?floor", ("floor_sf",)),
        (r"floors?\s*(?:are|is)?\s*" + _NUM + r"\s*" + _SF, ("floor_sf",)),
        # Soffit / bulkhead
        (r"soffits?\s*" + _NUM + r"\s*" + _LF, ("soffit_lf",)),
        (_NUM + r"\s*" + _LF + r"\s*(?:of\s*)?soffit", ("soffit_lf",)),
        (r"bulkheads?\s*" + _NUM + r"\s*" + _LF, ("soffit_lf",)),
        # Doors and windows
        (_INT + r"\s*(?:interior\s*)?doors?\b", ("doors_count", "door_count")),
        (r"doors?\s*(?:count|qty|quantity)?[:\s]*" + _INT, ("doors_count", "door_count")),
        (_INT + r"\s*windows?\b", ("windows_count", "window_count")),
        (r"windows?\s*(?:count|qty|quantity)?[:\s]*" + _INT, ("windows_count", "window_count")),
        # Ceiling height
        (_NUM + r"['\s]*(?:foot|feet|ft|')?\s*ceilings?", ("ceiling_height",)),
        (r"ceilings?\s*(?:height|ht)?[:\s]*" + _NUM + r"['\s]*(?:foot|ft|feet|')?", ("ceiling_height",)),
        (_NUM + r"['\s]*(?:foot|feet|ft|')?\s*(?:high|tall|height)", ("ceiling_height",)),
        # Decks
        (r"deck\s*" + _NUM + r"\s*" + _SF, ("deck_sf",)),
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?deck", ("deck_sf",)),
        (_INT + r"\s*posts?\b", ("post_count",)),
        (_NUM + r"\s*" + _LF + r"\s*(?:of\s*)?rail(?:ing)?", ("rail_lf",)),
        (r"rail(?:ing)?s?\s*" + _NUM + r"\s*" + _LF, ("rail_lf",)),
        # Rooms
        (_INT + r"\s*rooms?\b", ("room_count",)),
        (_INT + r"\s*(?:outside|exterior)\s*corners?", ("outside_corners",)),
        (r"(?:room\s*)?perimeter\s*" + _NUM + r"\s*" + _LF, ("room_perimeter",)),
        (r"door\s*openings?\s*" + _NUM + r"\s*" + _LF, ("door_openings_lf",)),
        # Baths
        (_INT + r"\s*full\s*baths?", ("full_bath",)),
        (_INT + r"\s*half\s*baths?", ("half_bath",)),
        # Roofing and siding
        (_NUM + r"\s*(?:roof\s*)?squares?\b(?!\s*(?:feet|foot|ft|yards?))", ("roof_squares",)),
        (_NUM + r"\s*" + _SF + r"\s*(?:of\s*)?siding", ("siding_sf",)),
        (r"siding\s*" + _NUM + r"\s*" + _SF, ("siding_sf",)),
    )
)


def extract_variables_from_text(text: str) -> dict[str, float]:
    """Return measurement variables found in *text*.

    Each pattern may bind several names.  A name already bound by an
    earlier pattern is never overwritten.
    """
    variables: dict[str, float] = {}
    lower = text.lower()

    for regex, names in _PATTERNS:
        m = regex.search(lower)
        if not m:
            continue
        value = float(m.group(1))
        for name in names:
            if name not in variables:
                variables[name] = value

    return variables
