"""Price lookup from an embedded price book.  Always available."""

from __future__ import annotations

import logging
from typing import Sequence

from commandcenter.pricing.base import PriceCandidate, PricingService

logger = logging.getLogger(__name__)

SOURCE = "price_book"

# keyword -> (unit price USD, unit, product name); longer keywords win ties
PRICE_BOOK: dict[str, tuple[float, str, str]] = {
    "drywall": (14.28, "SHT", "1/2 in. x 4 ft. x 8 ft. Gypsum Board"),
    "joint compound": (18.97, "EA", "All Purpose Joint Compound, 4.5 gal"),
    "drywall tape": (6.48, "EA", "Paper Drywall Tape, 500 ft"),
    "drywall screws": (9.97, "EA", "Coarse Drywall Screws, 1 lb"),
    "stud": (4.25, "EA", "2 in. x 4 in. x 8 ft. Stud"),
    "plates": (4.25, "EA", "2 in. x 4 in. x 8 ft. Stud"),
    "insulation": (0.62, "SF", "R-13 Kraft Faced Batt"),
    "outlet": (2.18, "EA", "15 Amp Duplex Outlet"),
    "gfci outlet": (19.97, "EA", "20 Amp GFCI Outlet"),
    "recessed light": (17.97, "EA", "6 in. LED Recessed Retrofit"),
    "switch": (1.98, "EA", "15 Amp Single-Pole Switch"),
    "lvp": (2.79, "SF", "Luxury Vinyl Plank, 20 mil"),
    "baseboard": (1.38, "LF", "MDF Baseboard, 3-1/4 in."),
    "interior door": (128.00, "EA", "Pre-Hung Interior Door, 30 in."),
    "toilet": (248.00, "EA", "Two-Piece Elongated Toilet"),
    "vanit": (299.00, "EA", "30 in. Vanity with Top"),
    "paint": (38.98, "EA", "Interior Paint, 1 gal"),
    "shingle": (36.98, "EA", "Architectural Shingles, bundle"),
    "underlayment": (89.00, "EA", "Synthetic Roof Underlayment, roll"),
    "siding": (135.00, "SQ", "Vinyl Lap Siding, square"),
    "deck board": (3.45, "SF", "Composite Deck Board"),
    "joist": (14.87, "EA", "2 in. x 8 in. x 12 ft. Pressure-Treated"),
    "post": (24.97, "EA", "6 in. x 6 in. x 8 ft. Pressure-Treated Post"),
    "railing": (89.00, "EA", "6 ft. Railing Kit"),
}

# Multipliers relative to the book price
REGIONAL_FACTORS: dict[str, float] = {
    "rhode island": 1.08,
    "massachusetts": 1.12,
    "connecticut": 1.10,
    "new york": 1.18,
    "us_avg": 1.0,
}


class LocalPricingService(PricingService):
    """Keyword match against :data:`PRICE_BOOK`, scaled by region."""

    def __init__(self, price_book: dict[str, tuple[float, str, str]] | None = None) -> None:
        self._book = dict(price_book if price_book is not None else PRICE_BOOK)

    def lookup(
        self,
        descriptions: Sequence[str],
        region: str | None = None,
    ) -> dict[str, list[PriceCandidate]]:
        factor = REGIONAL_FACTORS.get((region or "").strip().lower(), 1.0)
        return {d: self._candidates(d, factor) for d in descriptions}

    def _candidates(self, description: str, factor: float) -> list[PriceCandidate]:
        lower = description.lower()
        hits = sorted(
            (k for k in self._book if k in lower),
            key=len,
            reverse=True,
        )
        candidates = []
        for rank, keyword in enumerate(hits):
            price, unit, product = self._book[keyword]
            candidates.append(PriceCandidate(
                source=SOURCE,
                price=round(price * factor, 2),
                unit=unit,
                product_name=product,
                confidence=round(max(0.98 - 0.1 * rank, 0.5), 2),
                match_type="strict" if rank == 0 else "fuzzy",
            ))
        if not candidates:
            logger.debug("No price book entry for %r", description)
        return candidates

    def is_available(self) -> bool:
        return True
