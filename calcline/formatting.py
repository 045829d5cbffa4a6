"""Text rendering for values and diagnostics."""

from __future__ import annotations

from rich.text import Text

from calcline.models import Evaluation, ParseError

ERROR_HEADLINE = "Could not evaluate expression"

# Inputs longer than this are not echoed under the diagnostic
_ECHO_LIMIT = 200


def format_value(value: float, precision: int = 6) -> str:
    """Render a value in printf ``%g`` style with ``precision`` significant digits.

    '14', '3.14159', '1e+20', 'inf', 'nan'. Negative zero prints as '0'.
    """
    if value == 0.0:
        value = 0.0
    return f"{value:.{precision}g}"

def _detail(error: ParseError) -> str:
    return f"{error.message or error.kind.label} (column {error.column})"


def render_error(result: Evaluation) -> Text:
    """Headline plus the input with a caret under the failing column."""
    text = Text()
    text.append(ERROR_HEADLINE, style="bold red")
    if result.error is None:
        return text
    error = result.error
    text.append(f": {_detail(error)}")
    if error.position <= len(result.text) <= _ECHO_LIMIT:
        # Echo and caret pad share one tab expansion
        pad = len(result.text[:error.position].expandtabs())
        text.append(f"\n  {result.text.expandtabs()}\n", style="dim")
        text.append("  " + " " * pad + "^", style="red")
    return text
