"""PricingService interface and price-candidate model."""

from __future__ import annotations

import abc
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from commandcenter.config import DEFAULT_UNIT


class PricingError(Exception):
    """Raised when a pricing lookup cannot be completed."""


class PriceCandidate(BaseModel):
    """One ranked price suggestion for an item description."""

    model_config = ConfigDict(populate_by_name=True)

    source: str
    """Where the price came from, e.g. 'price_book' or 'knowledge_base'."""

    price: Optional[float] = None
    unit: str = DEFAULT_UNIT
    product_name: str = Field(default="", alias="productName")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    match_type: str = Field(default="none", alias="matchType")
    store: Optional[str] = None
    note: Optional[str] = None


def best_candidate(candidates: Sequence[PriceCandidate]) -> PriceCandidate | None:
    """Highest-confidence candidate that carries a price."""
    priced = [c for c in candidates if c.price is not None]
    if not priced:
        return None
    return max(priced, key=lambda c: c.confidence)


class PricingService(abc.ABC):
    """Abstract price-lookup collaborator."""

    @abc.abstractmethod
    def lookup(
        self,
        descriptions: Sequence[str],
        region: str | None = None,
    ) -> dict[str, list[PriceCandidate]]:
        """Return candidates per description, best first.

        Parameters
        ----------
        descriptions:
            Item descriptions to price.
        region:
            Optional region name or ZIP code.

        Raises
        ------
        PricingError
            If the lookup as a whole fails.
        """

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Return True if this service is ready."""
