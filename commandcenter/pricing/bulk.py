"""Chunked bulk pricing with per-batch failure isolation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence, TypeVar

from commandcenter.config import PRICING_BATCH_SIZE
from commandcenter.pricing.base import PriceCandidate, PricingError, PricingService, best_candidate

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int], None]


@dataclass
class BulkPricingReport:
    """Counts from one bulk pricing run."""

    total: int = 0
    priced: int = 0
    unmatched: int = 0
    failed: int = 0
    batches: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.priced + self.unmatched + self.failed


def price_in_batches(
    service: PricingService,
    items: Sequence[T],
    describe: Callable[[T], str],
    apply: Callable[[T, PriceCandidate], None],
    *,
    region: str | None = None,
    batch_size: int = PRICING_BATCH_SIZE,
    on_progress: ProgressCallback | None = None,
) -> BulkPricingReport:
    """Price *items* one batch at a time.

    Parameters
    ----------
    service:
        The pricing collaborator.
    items:
        Whatever is being priced; *describe* maps each to the lookup text.
    apply:
        Called with the item and its best priced candidate as soon as its
        batch returns.  Items without a priced candidate are skipped.
    batch_size:
        Items per lookup call.
    on_progress:
        Called with ``(processed, total)`` after every batch.

    Returns
    -------
    BulkPricingReport
        A :class:`PricingError` fails only its own batch; its items are
        counted as failed and earlier batches stay applied.
    """
    batch_size = max(1, batch_size)
    report = BulkPricingReport(total=len(items))

    for start in range(0, len(items), batch_size):
        batch = items[start:start + batch_size]
        report.batches += 1
        try:
            results = service.lookup([describe(i) for i in batch], region)
        except PricingError as exc:
            report.failed += len(batch)
            report.errors.append(str(exc))
            logger.warning("Pricing batch %d failed: %s", report.batches, exc)
        else:
            for item in batch:
                best = best_candidate(results.get(describe(item), []))
                if best is None:
                    report.unmatched += 1
                    continue
                apply(item, best)
                report.priced += 1

        if on_progress is not None:
            on_progress(report.processed, report.total)

    logger.info(
        "Bulk pricing: %d priced, %d unmatched, %d failed of %d",
        report.priced, report.unmatched, report.failed, report.total,
    )
    return report
