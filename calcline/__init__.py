"""calcline: line-oriented arithmetic calculator.

Evaluates one line of text at a time with a recursive-descent parser that
folds each subexpression straight into a float. No syntax tree, no eval().

Usage:
    python -m calcline repl                 # Interactive prompt
    python -m calcline eval "2 + 3 * 4"     # One-shot evaluation
    python -m calcline file exprs.txt       # One expression per line
"""

from calcline.evaluator import calc, evaluate
from calcline.models import ErrorKind, Evaluation, ExpressionError, ParseError

__all__ = [
    "calc",
    "evaluate",
    "ErrorKind",
    "Evaluation",
    "ExpressionError",
    "ParseError",
]
