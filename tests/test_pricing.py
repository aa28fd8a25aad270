"""Tests for the pricing collaborators and the bulk pricing runner."""

from __future__ import annotations

from typing import Sequence
from unittest.mock import MagicMock, patch

import pytest
import requests

from commandcenter.pricing import (
    HTTPPricingService,
    LocalPricingService,
    PriceCandidate,
    PricingError,
    PricingService,
    best_candidate,
    price_in_batches,
)


def _response(body=None, json_error: Exception | None = None) -> MagicMock:
    resp = MagicMock()
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = body
    return resp


class _ScriptedPricing(PricingService):
    """Prices every description at 1.0, except on the call numbers in *fail_on*."""

    def __init__(self, fail_on: tuple[int, ...] = ()) -> None:
        self.calls: list[list[str]] = []
        self._fail_on = fail_on

    def lookup(self, descriptions: Sequence[str], region: str | None = None) -> dict[str, list[PriceCandidate]]:
        self.calls.append(list(descriptions))
        if len(self.calls) in self._fail_on:
            raise PricingError(f"batch {len(self.calls)} timed out")
        return {
            d: [PriceCandidate(source="test", price=1.0, confidence=0.9)]
            for d in descriptions if not d.startswith("unknown")
        }

    def is_available(self) -> bool:
        return True


# ── PriceCandidate ───────────────────────────────────────────────────────────

class TestPriceCandidate:

    def test_wire_aliases(self) -> None:
        candidate = PriceCandidate.model_validate({
            "source": "home_depot", "price": 14.5, "productName": "Gypsum Board", "matchType": "strict",
        })
        assert candidate.product_name == "Gypsum Board"
        assert candidate.match_type == "strict"

    def test_best_candidate_skips_unpriced(self) -> None:
        candidates = [
            PriceCandidate(source="a", price=None, confidence=0.99),
            PriceCandidate(source="b", price=10.0, confidence=0.6),
            PriceCandidate(source="c", price=12.0, confidence=0.8),
        ]
        assert best_candidate(candidates).source == "c"
        assert best_candidate([]) is None


# ── LocalPricingService ──────────────────────────────────────────────────────

class TestLocalPricingService:

    def test_longest_keyword_ranks_first(self) -> None:
        candidates = LocalPricingService().lookup(["GFCI outlet"], "us_avg")["GFCI outlet"]
        assert [(c.product_name, c.match_type) for c in candidates] == [
            ("20 Amp GFCI Outlet", "strict"),
            ("15 Amp Duplex Outlet", "fuzzy"),
        ]
        assert candidates[0].price == 19.97
        assert candidates[0].confidence > candidates[1].confidence

    def test_regional_factor(self) -> None:
        service = LocalPricingService()
        assert service.lookup(["Drywall"], "Rhode Island")["Drywall"][0].price == 15.42
        assert service.lookup(["Drywall"], "Atlantis")["Drywall"][0].price == 14.28

    def test_unknown_item(self) -> None:
        assert LocalPricingService().lookup(["Mystery Widget"]) == {"Mystery Widget": []}

    def test_custom_price_book(self) -> None:
        service = LocalPricingService({"widget": (2.0, "EA", "Widget")})
        assert service.lookup(["blue widget"], "us_avg")["blue widget"][0].price == 2.0
        assert service.is_available()


# ── HTTPPricingService ───────────────────────────────────────────────────────

class TestHTTPPricingService:

    def test_posts_items_and_ranks_candidates(self) -> None:
        body = {
            "success": True,
            "results": {
                "Drywall": [
                    {"source": "home_depot", "price": 14.5, "confidence": 0.6},
                    {"source": "lowes", "price": 15.0, "confidence": 0.9, "store": "Lowe's"},
                    {"price": "not a number"},
                ],
            },
        }
        service = HTTPPricingService("https://prices.example/lookup", api_key="k")
        with patch("commandcenter.pricing.http.requests.post", return_value=_response(body)) as post:
            results = service.lookup(["Drywall"], "02903")

        assert [c.source for c in results["Drywall"]] == ["lowes", "home_depot"]
        _, kwargs = post.call_args
        assert kwargs["json"] == {"items": ["Drywall"], "zipCode": "02903"}
        assert kwargs["headers"]["Authorization"] == "Bearer k"
        assert kwargs["timeout"] == 30

    def test_not_configured(self) -> None:
        service = HTTPPricingService()
        assert service.is_available() is False
        with pytest.raises(PricingError, match="not configured"):
            service.lookup(["Drywall"])

    def test_rejects_oversized_batch(self) -> None:
        service = HTTPPricingService("https://prices.example/lookup")
        with pytest.raises(PricingError, match="At most 10"):
            service.lookup([f"item {i}" for i in range(11)])

    def test_network_error(self) -> None:
        service = HTTPPricingService("https://prices.example/lookup")
        with patch(
            "commandcenter.pricing.http.requests.post",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            with pytest.raises(PricingError, match="connection refused"):
                service.lookup(["Drywall"])

    def test_invalid_json(self) -> None:
        service = HTTPPricingService("https://prices.example/lookup")
        with patch(
            "commandcenter.pricing.http.requests.post",
            return_value=_response(json_error=ValueError("Expecting value")),
        ):
            with pytest.raises(PricingError, match="invalid JSON"):
                service.lookup(["Drywall"])

    def test_service_reports_failure(self) -> None:
        service = HTTPPricingService("https://prices.example/lookup")
        with patch(
            "commandcenter.pricing.http.requests.post",
            return_value=_response({"success": False, "error": "rate limited"}),
        ):
            with pytest.raises(PricingError, match="rate limited"):
                service.lookup(["Drywall"])


# ── price_in_batches ─────────────────────────────────────────────────────────

class TestPriceInBatches:

    def test_chunks_and_applies(self) -> None:
        service = _ScriptedPricing()
        applied: list[str] = []
        items = [f"item {i}" for i in range(25)]

        report = price_in_batches(
            service, items, str, lambda item, _c: applied.append(item), batch_size=10,
        )
        assert [len(c) for c in service.calls] == [10, 10, 5]
        assert report.batches == 3
        assert report.priced == 25
        assert applied == items

    def test_failed_batch_does_not_stop_the_run(self) -> None:
        service = _ScriptedPricing(fail_on=(2,))
        progress: list[tuple[int, int]] = []
        items = [f"item {i}" for i in range(25)]

        report = price_in_batches(
            service, items, str, lambda _i, _c: None,
            batch_size=10, on_progress=lambda done, total: progress.append((done, total)),
        )
        assert (report.priced, report.failed) == (15, 10)
        assert report.errors == ["batch 2 timed out"]
        assert progress == [(10, 25), (20, 25), (25, 25)]

    def test_unmatched_items_counted(self) -> None:
        report = price_in_batches(
            _ScriptedPricing(), ["drywall", "unknown thing"], str, lambda _i, _c: None,
        )
        assert (report.priced, report.unmatched, report.processed) == (1, 1, 2)

    def test_batch_size_floor(self) -> None:
        service = _ScriptedPricing()
        price_in_batches(service, ["a", "b"], str, lambda _i, _c: None, batch_size=0)
        assert len(service.calls) == 2
