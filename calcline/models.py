"""Data models for the calcline evaluator.

ErrorKind, ParseError, ParserState, Evaluation, ExpressionError: the typed
structures that flow through evaluator → repl → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from calcline.config import Settings


class ErrorKind(str, Enum):
    """Why an evaluation failed."""

    UNEXPECTED_CHARACTER = "unexpected-character"
    UNBALANCED_PARENTHESIS = "unbalanced-parenthesis"
    UNEXPECTED_END = "unexpected-end"
    INPUT_TOO_LONG = "input-too-long"
    NESTING_TOO_DEEP = "nesting-too-deep"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


@dataclass(frozen=True)
class ParseError:
    """Where and why parsing stopped.

    ``position`` is the 0-based cursor index at the point of failure, before
    the cursor is forced to end-of-buffer.
    """

    kind: ErrorKind
    position: int
    message: str = ""

    @property
    def column(self) -> int:
        return self.position + 1

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "position": self.position,
            "message": self.message,
        }


@dataclass
class ParserState:
    """Cursor and error flag for a single evaluation.

    Created fresh per request and threaded through every grammar tier, so
    evaluations never share state.
    """

    text: str
    cursor: int = 0
    had_error: bool = False
    error: Optional[ParseError] = None
    depth: int = 0
    max_depth: int = Settings().max_depth

    @property
    def at_end(self) -> bool:
        return self.cursor >= len(self.text)

    def peek(self) -> str:
        """Character under the cursor, or '' at end of input."""
        if self.at_end:
            return ""
        return self.text[self.cursor]

    def fail(self, kind: ErrorKind, message: str = "") -> float:
        """Record the first failure and abandon the rest of the input.

        Returns the 0.0 placeholder so grammar tiers can ``return state.fail(...)``.
        """
        if not self.had_error:
            self.had_error = True
            self.error = ParseError(kind=kind, position=min(self.cursor, len(self.text)), message=message)
        self.cursor = len(self.text)
        return 0.0


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating one line: a value or a parse error."""

    text: str
    value: float = 0.0
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        d: dict = {"text": self.text, "ok": self.ok}
        if self.error:
            d["error"] = self.error.to_dict()
        else:
            d["value"] = self.value
        return d


class ExpressionError(ValueError):
    """Raised by calc() when an expression cannot be evaluated."""

    def __init__(self, text: str, error: ParseError) -> None:
        self.text = text
        self.error = error
        detail = error.message or error.kind.label
        super().__init__(f"{detail} at column {error.column}: {text!r}")
