"""AssemblyResolver — turn assembly references and measurements into drafts and RFIs.

The resolver only computes; persisting drafts and RFIs is left to the
command executor.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from pydantic import BaseModel, Field

from commandcenter.assemblies.catalog import AssemblyCatalog
from commandcenter.formula import evaluate_formula

logger = logging.getLogger(__name__)


class DraftItem(BaseModel):
    """A formula-derived takeoff line awaiting review."""

    category: str
    description: str
    unit: str
    quantity: float
    draft: bool = True
    notes: str


class RFIRequest(BaseModel):
    """A clarification request for measurements an item could not be computed without."""

    question: str
    trade: str
    missing_vars: list[str] = Field(default_factory=list)


class Resolution(BaseModel):
    drafts: list[DraftItem] = Field(default_factory=list)
    rfis: list[RFIRequest] = Field(default_factory=list)
    matched: list[str] = Field(default_factory=list)
    """Names of the assemblies that matched."""

    @property
    def drafts_count(self) -> int:
        return len(self.drafts)

    @property
    def rfis_count(self) -> int:
        return len(self.rfis)


def rfi_question(description: str, missing_vars: list[str]) -> str:
    return f'Missing measurement for "{description}": need {", ".join(missing_vars)}'


class AssemblyResolver:
    """Evaluate matched assemblies item by item.

    Parameters
    ----------
    catalog:
        Source of assembly definitions.  Defaults to the seed library.
    """

    def __init__(self, catalog: AssemblyCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else AssemblyCatalog()

    def resolve(
        self,
        fragments: Iterable[str],
        variables: Mapping[str, float],
        project_type: str,
    ) -> Resolution:
        """Match *fragments* against the catalog and evaluate every item.

        Parameters
        ----------
        fragments:
            Assembly references such as ``["framing", "drywall"]``.
        variables:
            Measurement bindings for the item formulas.
        project_type:
            Only assemblies tagged with this type are considered.

        Returns
        -------
        Resolution
            Draft items for computable quantities, one RFI per distinct
            question for items with missing measurements.  Items that
            evaluate to a non-positive quantity are dropped.
        """
        matched = self.catalog.match(fragments, project_type)
        resolution = Resolution(matched=[a.name for a in matched])
        seen_questions: set[str] = set()

        for assembly in matched:
            for item in assembly.items:
                outcome = evaluate_formula(item.quantity_formula, variables)

                if outcome.missing_vars:
                    question = rfi_question(item.description, outcome.missing_vars)
                    if question not in seen_questions:
                        seen_questions.add(question)
                        resolution.rfis.append(RFIRequest(
                            question=question,
                            trade=assembly.trade,
                            missing_vars=list(outcome.missing_vars),
                        ))
                    continue

                if outcome.result is None or outcome.result <= 0:
                    continue

                resolution.drafts.append(DraftItem(
                    category=assembly.trade,
                    description=item.description,
                    unit=item.unit,
                    quantity=outcome.result,
                    notes=f"Generated from {assembly.name} | Formula: {item.quantity_formula}",
                ))

        logger.debug(
            "Resolved %d assemblies for %s: %d drafts, %d RFIs",
            len(matched), project_type, resolution.drafts_count, resolution.rfis_count,
        )
        return resolution
