"""Record models for projects, takeoff items, RFIs and labor."""

from commandcenter.models.records import (
    RFI,
    LaborEstimate,
    LaborLineItem,
    Project,
    TakeoffItem,
    compute_extended_cost,
    new_id,
)

__all__ = [
    "LaborEstimate",
    "LaborLineItem",
    "Project",
    "RFI",
    "TakeoffItem",
    "compute_extended_cost",
    "new_id",
]
