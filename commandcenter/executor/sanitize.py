"""Coercion of externally supplied price-like values."""

from __future__ import annotations

import math
import re
from typing import Any

_STRIP_RE = re.compile(r"[$,\s]")


def coerce_price(value: Any) -> float | None:
    """Return a float price, or *None* when no usable price is present.

    Numbers pass through.  Strings lose currency symbols, commas and
    whitespace before parsing.  Anything else, including ``"TBD"``,
    booleans and non-finite numbers, yields *None*, never 0.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _STRIP_RE.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
