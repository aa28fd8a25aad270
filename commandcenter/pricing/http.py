"""Remote price-lookup client over HTTP."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import requests
from pydantic import ValidationError

from commandcenter.config import PRICING_BATCH_SIZE
from commandcenter.pricing.base import PriceCandidate, PricingError, PricingService

logger = logging.getLogger(__name__)


class HTTPPricingService(PricingService):
    """POSTs ``{"items": [...], "zipCode": ...}`` to a price-lookup endpoint.

    The endpoint answers ``{"success": true, "results": {description:
    [candidate, ...]}}``.  It accepts at most :data:`PRICING_BATCH_SIZE`
    items per request; callers chunk with
    :func:`~commandcenter.pricing.bulk.price_in_batches`.

    Parameters
    ----------
    url:
        Endpoint URL.
    api_key:
        Optional bearer token.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float = 30,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout

    def is_available(self) -> bool:
        return bool(self._url)

    def lookup(
        self,
        descriptions: Sequence[str],
        region: str | None = None,
    ) -> dict[str, list[PriceCandidate]]:
        if not self.is_available():
            raise PricingError("Pricing service URL is not configured")
        if len(descriptions) > PRICING_BATCH_SIZE:
            raise PricingError(
                f"At most {PRICING_BATCH_SIZE} items per request, got {len(descriptions)}"
            )

        payload: dict[str, Any] = {"items": list(descriptions)}
        if region:
            payload["zipCode"] = region
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            resp = requests.post(self._url, json=payload, headers=headers, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as exc:
            raise PricingError(f"Price lookup failed: {exc}") from exc
        except ValueError as exc:
            raise PricingError("Price lookup returned invalid JSON") from exc

        if not body.get("success", False):
            raise PricingError(body.get("error") or "Price lookup failed")

        results: dict[str, list[PriceCandidate]] = {}
        for description, raw in (body.get("results") or {}).items():
            candidates = []
            for item in raw or []:
                try:
                    candidates.append(PriceCandidate.model_validate(item))
                except ValidationError:
                    logger.debug("Skipping malformed candidate for %r", description, exc_info=True)
            candidates.sort(key=lambda c: c.confidence, reverse=True)
            results[description] = candidates
        return results
