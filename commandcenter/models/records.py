"""Record shapes written to the record store."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from commandcenter.config import DEFAULT_REGION, DEFAULT_UNIT


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def compute_extended_cost(quantity: float, unit_cost: float | None) -> float:
    """Quantity times unit cost, treating a missing price as zero."""
    return round(quantity * (unit_cost or 0.0), 2)


class Record(BaseModel):
    """Base for stored records; ``to_record`` is what the store receives."""

    id: str = Field(default_factory=new_id)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Project(Record):
    name: str
    address: Optional[str] = None
    region: str = DEFAULT_REGION
    user_id: Optional[str] = None
    tax_percent: Optional[float] = None
    markup_percent: Optional[float] = None
    labor_burden_percent: Optional[float] = None
    waste_percent: Optional[float] = None


class TakeoffItem(Record):
    """A material line item.

    ``draft`` marks a computed, unreviewed quantity.  ``unit_cost=None``
    means no price yet, and contributes nothing to ``extended_cost``.
    """

    project_id: str
    category: str = "General"
    description: str
    unit: str = DEFAULT_UNIT
    quantity: float = 0.0
    unit_cost: Optional[float] = None
    extended_cost: float = 0.0
    draft: bool = False
    notes: Optional[str] = None
    price_source: Optional[str] = None

    @model_validator(mode="after")
    def _compute_extended(self) -> TakeoffItem:
        self.extended_cost = compute_extended_cost(self.quantity, self.unit_cost)
        return self


class RFI(Record):
    project_id: str
    question: str
    trade: str = "General"
    status: str = "open"
    """Status: 'open', 'answered', 'closed'."""


class LaborEstimate(Record):
    project_id: str


class LaborLineItem(Record):
    labor_estimate_id: str
    task_name: str
    quantity: float
    unit: str = DEFAULT_UNIT
    base_rate: Optional[float] = None
    final_rate: Optional[float] = None
    extended: Optional[float] = None
    trade: str = "General"
