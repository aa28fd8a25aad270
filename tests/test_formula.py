"""Tests for the formula evaluator and measurement-variable extraction."""

from __future__ import annotations

import pytest

from commandcenter.formula import (
    FormulaResult,
    evaluate_formula,
    extract_variables,
    extract_variables_from_text,
    required_variables,
)
from commandcenter.formula.evaluator import tokenize


# ---------------------------------------------------------------------------
# evaluate_formula
# ---------------------------------------------------------------------------

class TestEvaluateFormula:

    def test_precedence_with_variables(self) -> None:
        outcome = evaluate_formula("{a}+{b}*2", {"a": 3, "b": 4})
        assert outcome == FormulaResult(11.0, [])

    def test_missing_variable_is_reported_not_evaluated(self) -> None:
        outcome = evaluate_formula("{x}*2", {})
        assert outcome.result is None
        assert outcome.missing_vars == ["x"]

    def test_rounds_up_to_next_cent(self) -> None:
        assert evaluate_formula("10/3", {}).result == 3.34

    def test_float_noise_does_not_round_up(self) -> None:
        assert evaluate_formula("0.1 + 0.2", {}).result == 0.3

    def test_parentheses_and_unary_minus(self) -> None:
        assert evaluate_formula("2 * (3 + 4)", {}).result == 14.0
        assert evaluate_formula("-{a} + 10", {"a": 4}).result == 6.0

    def test_division_by_zero_yields_zero(self) -> None:
        assert evaluate_formula("{a} / 0", {"a": 12}).result == 0.0

    def test_none_binding_counts_as_missing(self) -> None:
        outcome = evaluate_formula("{wall_lf} * 0.75", {"wall_lf": None})
        assert outcome.result is None
        assert outcome.missing_vars == ["wall_lf"]

    def test_missing_variables_deduplicated_in_order(self) -> None:
        outcome = evaluate_formula("{x} + {y} * {x}", {})
        assert outcome.missing_vars == ["x", "y"]

    def test_plain_names_without_braces(self) -> None:
        assert evaluate_formula("wall_lf / 8 * 2", {"wall_lf": 40}).result == 10.0

    def test_never_raises(self) -> None:
        outcome = evaluate_formula(None, {})  # type: ignore[arg-type]
        assert outcome == FormulaResult(None, [])

    @pytest.mark.parametrize("formula, expected", [
        ("{wall_lf} * 0.75", 112.5),
        ("{wall_lf} / 8 * 2", 37.5),
        ("({wall_lf} + 10) / 3", 53.34),
    ])
    def test_assembly_style_formulas(self, formula: str, expected: float) -> None:
        assert evaluate_formula(formula, {"wall_lf": 150}).result == expected


class TestTokenize:

    def test_braces_are_skipped(self) -> None:
        kinds = [t.kind for t in tokenize("({a} + 1.5)")]
        assert kinds == ["lparen", "variable", "operator", "number", "rparen"]


# ---------------------------------------------------------------------------
# Variable requirements
# ---------------------------------------------------------------------------

class TestExtractVariables:

    def test_deduplicated_names(self) -> None:
        names = extract_variables("({wall_sf} + {ceiling_sf}) / 32 + {wall_sf}")
        assert names == ["wall_sf", "ceiling_sf"]

    def test_constant_formula_has_no_variables(self) -> None:
        assert extract_variables("2") == []

    def test_required_variables_across_formulas(self) -> None:
        assert required_variables(["{a} * 2", "{b} + {a}"]) == ["a", "b"]


# ---------------------------------------------------------------------------
# Measurements from free text
# ---------------------------------------------------------------------------

class TestExtractVariablesFromText:

    def test_walls_ceiling_and_doors(self) -> None:
        found = extract_variables_from_text("walls 150 lf, 8 ft ceilings, 4 doors")
        assert found["wall_lf"] == 150.0
        assert found["ceiling_height"] == 8.0
        assert found["doors_count"] == 4.0
        assert found["door_count"] == 4.0

    def test_deck_measurements(self) -> None:
        found = extract_variables_from_text("Deck 300 sf, 6 posts, 40 lf of railing")
        assert found == {"deck_sf": 300.0, "post_count": 6.0, "rail_lf": 40.0}

    def test_square_footage(self) -> None:
        found = extract_variables_from_text("900 sf of drywall and 400 sf of ceiling")
        assert found["wall_sf"] == 900.0
        assert found["ceiling_sf"] == 400.0

    def test_no_measurements(self) -> None:
        assert extract_variables_from_text("framing and drywall please") == {}
