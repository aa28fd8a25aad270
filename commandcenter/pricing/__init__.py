"""Pricing collaborator: interface, embedded price book, HTTP client, bulk runner."""

from commandcenter.pricing.base import PriceCandidate, PricingError, PricingService, best_candidate
from commandcenter.pricing.bulk import BulkPricingReport, price_in_batches
from commandcenter.pricing.http import HTTPPricingService
from commandcenter.pricing.local import LocalPricingService

__all__ = [
    "BulkPricingReport",
    "HTTPPricingService",
    "LocalPricingService",
    "PriceCandidate",
    "PricingError",
    "PricingService",
    "best_candidate",
    "price_in_batches",
]
