"""Formula evaluation and measurement-variable extraction."""

from commandcenter.formula.evaluator import (
    FormulaResult,
    evaluate_formula,
    extract_variables,
    required_variables,
)
from commandcenter.formula.variables import VARIABLE_LABELS, extract_variables_from_text

__all__ = [
    "FormulaResult",
    "VARIABLE_LABELS",
    "evaluate_formula",
    "extract_variables",
    "extract_variables_from_text",
    "required_variables",
]
