"""Safe formula evaluator — arithmetic over named variables, no eval().

Supports ``+ - * /``, parentheses, unary minus, decimal numbers and
variable names.  Stored assembly formulas wrap variables in braces
(``{wall_lf} * 0.75``); braces are simply skipped by the tokenizer.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_OPERATORS = frozenset("+-*/")


@dataclass(frozen=True)
class Token:
    kind: str
    """One of 'number', 'operator', 'variable', 'lparen', 'rparen'."""

    value: float | str


@dataclass(frozen=True)
class FormulaResult:
    """Outcome of :func:`evaluate_formula`."""

    result: float | None
    missing_vars: list[str] = field(default_factory=list)


def tokenize(formula: str) -> list[Token]:
    """Split *formula* into tokens, skipping anything unrecognised."""
    tokens: list[Token] = []
    i = 0
    n = len(formula)

    while i < n:
        char = formula[i]

        if char.isspace():
            i += 1
            continue

        m = _NUMBER_RE.match(formula, i)
        if m:
            tokens.append(Token("number", float(m.group(0))))
            i = m.end()
            continue

        if char in _OPERATORS:
            tokens.append(Token("operator", char))
            i += 1
            continue

        if char == "(":
            tokens.append(Token("lparen", char))
            i += 1
            continue
        if char == ")":
            tokens.append(Token("rparen", char))
            i += 1
            continue

        m = _IDENT_RE.match(formula, i)
        if m:
            tokens.append(Token("variable", m.group(0)))
            i = m.end()
            continue

        i += 1

    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[Token], variables: Mapping[str, float]) -> None:
        self.tokens = tokens
        self.variables = variables
        self.pos = 0

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def expression(self) -> float:
        left = self.term()
        while True:
            token = self._peek()
            if token is None or token.kind != "operator" or token.value not in ("+", "-"):
                return left
            self.pos += 1
            right = self.term()
            left = left + right if token.value == "+" else left - right

    def term(self) -> float:
        left = self.factor()
        while True:
            token = self._peek()
            if token is None or token.kind != "operator" or token.value not in ("*", "/"):
                return left
            self.pos += 1
            right = self.factor()
            if token.value == "*":
                left = left * right
            else:
                left = left / right if right != 0 else 0.0

    def factor(self) -> float:
        token = self._peek()
        if token is None:
            return 0.0

        if token.kind == "number":
            self.pos += 1
            return float(token.value)

        if token.kind == "variable":
            self.pos += 1
            # Presence is checked before parsing starts
            return float(self.variables[str(token.value)])

        if token.kind == "lparen":
            self.pos += 1
            value = self.expression()
            closing = self._peek()
            if closing is not None and closing.kind == "rparen":
                self.pos += 1
            return value

        if token.kind == "operator" and token.value == "-":
            self.pos += 1
            return -self.factor()

        return 0.0


def _round_up_to_cent(value: float) -> float:
    # Strip float noise first so 0.1 + 0.2 does not round up to 0.31
    return math.ceil(round(value * 100, 9)) / 100


def _dedupe(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def evaluate_formula(formula: str, variables: Mapping[str, float | None]) -> FormulaResult:
    """Evaluate *formula* with *variables*.

    Returns ``FormulaResult(result, [])`` on success, with the result
    rounded up to the next hundredth.  When any referenced variable is
    absent (or bound to ``None``) nothing is evaluated and the missing
    names are returned instead.  Never raises.
    """
    try:
        tokens = tokenize(formula)
        required = [str(t.value) for t in tokens if t.kind == "variable"]
        missing = [v for v in required if variables.get(v) is None]
        if missing:
            return FormulaResult(None, _dedupe(missing))

        value = _Parser(tokens, variables).expression()  # type: ignore[arg-type]
        if math.isnan(value) or math.isinf(value):
            return FormulaResult(None, [])
        return FormulaResult(_round_up_to_cent(value), [])
    except Exception:
        logger.debug("Formula evaluation failed for %r", formula, exc_info=True)
        return FormulaResult(None, [])


def extract_variables(formula: str) -> list[str]:
    """Return the deduplicated variable names referenced by *formula*."""
    return _dedupe(str(t.value) for t in tokenize(formula) if t.kind == "variable")


def required_variables(formulas: Iterable[str]) -> list[str]:
    """Return every variable needed by any of *formulas*, first-seen order."""
    names: list[str] = []
    for formula in formulas:
        names.extend(extract_variables(formula))
    return _dedupe(names)
