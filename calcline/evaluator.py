"""Recursive-descent evaluator for one line of arithmetic.

Each grammar rule is one function taking the shared ParserState; values are
folded as they are parsed, so no syntax tree is built.

    term    -> factor (("+" | "-") factor)*
    factor  -> expo   (("*" | "/") expo)*
    expo    -> unary  ("^" unary)?
    unary   -> "-" unary | primary
    primary -> NUMBER | "(" term ")"

Same-precedence operators are applied strictly left to right within a single
loop, so ``8/2*2`` is 8. The power tier is not chained:
``2^3^2`` stops after ``2^3`` and the trailing ``^2`` is reported as an
unexpected character.

Failures set the error on the state once (first failure wins) and move the
cursor to end-of-input; enclosing tiers keep returning placeholder values and
the caller inspects the state after the whole chain unwinds.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from calcline.config import Settings
from calcline.models import ErrorKind, Evaluation, ExpressionError, ParseError, ParserState

log = logging.getLogger(__name__)

_SPACE = " \t"
_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?")


# --- Cursor / matcher ---

def skip_space(state: ParserState) -> None:
    while not state.at_end and state.text[state.cursor] in _SPACE:
        state.cursor += 1


def match(state: ParserState, expected: str) -> bool:
    """Skip whitespace, then consume ``expected`` if it is next.

    Whitespace is consumed even when the match fails.
    """
    skip_space(state)
    if state.peek() != expected:
        return False
    state.cursor += 1
    return True


def _descend(state: ParserState) -> bool:
    if state.depth >= state.max_depth:
        state.fail(ErrorKind.NESTING_TOO_DEEP, f"nesting deeper than {state.max_depth} levels")
        return False
    state.depth += 1
    return True


# --- Native floating-point operations ---

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 is nan."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def power(base: float, exponent: float) -> float:
    """Real-valued power returning IEEE-754 inf/nan instead of raising."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow raises for 0 ** negative and negative ** fractional
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


# --- Grammar tiers ---

def primary(state: ParserState) -> float:
    if match(state, "("):
        if not _descend(state):
            return 0.0
        value = term(state)
        state.depth -= 1
        if not match(state, ")"):
            if state.at_end:
                return state.fail(ErrorKind.UNBALANCED_PARENTHESIS, "missing ')'")
            return state.fail(ErrorKind.UNEXPECTED_CHARACTER, f"expected ')' but found {state.peek()!r}")
        return value

    literal = _NUMBER_RE.match(state.text, state.cursor)
    if literal:
        state.cursor = literal.end()
        return float(literal.group())

    if state.at_end:
        return state.fail(ErrorKind.UNEXPECTED_END, "expected a number or '('")
    return state.fail(ErrorKind.UNEXPECTED_CHARACTER, f"unexpected {state.peek()!r}")


def unary(state: ParserState) -> float:
    if match(state, "-"):
        if not _descend(state):
            return 0.0
        value = -unary(state)
        state.depth -= 1
        return value
    return primary(state)


def expo(state: ParserState) -> float:
    value = unary(state)
    if match(state, "^"):
        value = power(value, unary(state))
    return value


def factor(state: ParserState) -> float:
    value = expo(state)
    while True:
        if match(state, "*"):
            value *= expo(state)
        elif match(state, "/"):
            value = divide(value, expo(state))
        else:
            return value


def term(state: ParserState) -> float:
    value = factor(state)
    while True:
        if match(state, "+"):
            value += factor(state)
        elif match(state, "-"):
            value -= factor(state)
        else:
            return value


# --- Entry points ---

def evaluate(text: str, settings: Optional[Settings] = None) -> Evaluation:
    """Evaluate one line of text.

    Never raises for malformed input: the failure is returned on
    ``Evaluation.error`` and ``Evaluation.value`` is meaningless in that case.

    Args:
        text: The expression, without a trailing newline.
        settings: Length and nesting limits. Defaults to Settings().
    """
    settings = settings or Settings()

    if len(text) > settings.max_length:
        error = ParseError(
            kind=ErrorKind.INPUT_TOO_LONG,
            position=settings.max_length,
            message=f"input longer than {settings.max_length} characters",
        )
        log.debug("Rejected %d-character input", len(text))
        return Evaluation(text=text, error=error)

    state = ParserState(text=text, max_depth=settings.max_depth)
    try:
        value = term(state)
    except RecursionError:
        # max_depth set above what the interpreter stack can hold
        value = state.fail(ErrorKind.NESTING_TOO_DEEP, "nesting too deep for the interpreter stack")

    skip_space(state)
    if not state.at_end:
        if state.peek() == ")":
            state.fail(ErrorKind.UNBALANCED_PARENTHESIS, "unmatched ')'")
        else:
            state.fail(ErrorKind.UNEXPECTED_CHARACTER, f"unexpected {state.peek()!r}")

    if state.had_error:
        log.debug(
            "Could not evaluate %r: %s at column %d",
            text, state.error.kind.value, state.error.column,
        )
        return Evaluation(text=text, error=state.error)

    log.debug("Evaluated %r = %r", text, value)
    return Evaluation(text=text, value=value)


def calc(text: str, settings: Optional[Settings] = None) -> float:
    """Evaluate ``text`` and return its value.

    Raises:
        ExpressionError: If the text is not a valid expression.
    """
    result = evaluate(text, settings)
    if result.error is not None:
        raise ExpressionError(text, result.error)
    return result.value
