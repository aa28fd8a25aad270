"""Pydantic models for parametric trade assemblies."""

from __future__ import annotations

from pydantic import BaseModel, Field

from commandcenter.config import DEFAULT_UNIT
from commandcenter.formula import required_variables


class AssemblyVariable(BaseModel):
    """A measurement an assembly's formulas depend on."""

    name: str
    label: str
    unit: str


class AssemblyItem(BaseModel):
    """One material line of an assembly.

    ``quantity_formula`` is arithmetic over ``{variable}`` references,
    e.g. ``"({wall_sf} + {ceiling_sf}) / 32 * 1.1"``.
    """

    material_ref: str
    quantity_formula: str
    description: str
    unit: str = DEFAULT_UNIT


class AssemblyDefinition(BaseModel):
    """Static, reusable definition of the materials for one trade scope."""

    id: str
    name: str
    description: str = ""
    trade: str
    project_types: list[str] = Field(default_factory=list)
    variables: list[AssemblyVariable] = Field(default_factory=list)
    items: list[AssemblyItem] = Field(default_factory=list)

    def required_variables(self) -> list[str]:
        """Variable names referenced by any item formula, first-seen order."""
        return required_variables(item.quantity_formula for item in self.items)

    def matches(self, fragment: str) -> bool:
        """Case-insensitive containment of *fragment* in name or trade."""
        needle = fragment.strip().lower()
        if not needle:
            return False
        return needle in self.name.lower() or needle in self.trade.lower()
