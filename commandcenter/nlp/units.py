"""Number words, prices and unit synonyms."""

from __future__ import annotations

import re
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

UNIT_MAP = MappingProxyType({
    "sf": "SF",
    "sqft": "SF",
    "sq ft": "SF",
    "square feet": "SF",
    "square foot": "SF",
    "lf": "LF",
    "linear feet": "LF",
    "linear foot": "LF",
    "linear ft": "LF",
    "ft": "LF",
    "feet": "LF",
    "ea": "EA",
    "each": "EA",
    "pc": "EA",
    "pcs": "EA",
    "pieces": "EA",
    "sheet": "SHT",
    "sheets": "SHT",
    "bd ft": "BF",
    "board feet": "BF",
    "cy": "CY",
    "cubic yard": "CY",
    "cubic yards": "CY",
    "sy": "SY",
    "square yard": "SY",
    "square yards": "SY",
    "hr": "HR",
    "hrs": "HR",
    "hour": "HR",
    "hours": "HR",
})

# Unit alternation for item patterns, longest first
UNIT_PATTERN = (
    r"sq\s*ft|sqft|square\s*(?:feet|foot|yards?)|linear\s*(?:feet|foot|ft)|"
    r"board\s*feet|bd\s*ft|cubic\s*yards?|sheets?|pieces|pcs?|each|"
    r"sf|lf|ea|cy|sy"
)


def normalize_unit(unit: str) -> str:
    """Map a unit synonym to its short code; unknown units are upper-cased."""
    key = re.sub(r"\s+", " ", unit.lower().strip())
    return UNIT_MAP.get(key, unit.strip().upper())


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

WORD_NUMBERS = MappingProxyType({
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4,
    "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
    "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
    "hundred": 100,
})

_TENS = frozenset((20, 30, 40, 50, 60, 70, 80, 90))

_LEADING_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")
_PRICE_RE = re.compile(r"\$?\s*((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?)")


def parse_number(text: str) -> float | None:
    """Parse digits, a number word, or a two-word compound ("twenty five")."""
    m = _LEADING_NUMBER_RE.match(text)
    if m:
        return float(m.group(1))

    lower = text.lower().strip()
    if lower in WORD_NUMBERS:
        return float(WORD_NUMBERS[lower])

    parts = [p for p in re.split(r"[\s-]+", lower) if p]
    if len(parts) == 2:
        tens = WORD_NUMBERS.get(parts[0])
        ones = WORD_NUMBERS.get(parts[1])
        if tens in _TENS and ones is not None and 0 < ones < 10:
            return float(tens + ones)
    return None


def parse_price(text: str) -> float | None:
    """Parse ``$12.99``, ``12.99``, ``$12`` or ``$1,250.00``; ``None`` if no amount is present."""
    m = _PRICE_RE.search(text)
    if m:
        return float(m.group(1).replace(",", ""))
    return None


def capitalize_words(text: str) -> str:
    """Upper-case the first letter of each space-separated word."""
    return " ".join(w[:1].upper() + w[1:] for w in text.split(" "))
