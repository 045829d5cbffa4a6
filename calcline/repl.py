"""Host loop: read a line, evaluate it, print the value or a diagnostic.

Data flow per line:
1. Strip the line terminator
2. Skip blank lines without evaluating
3. Evaluate with a fresh parser state
4. Print the value on the output console, or the diagnostic on the error console
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from rich.console import Console
from rich.text import Text

from calcline.config import Settings
from calcline.evaluator import evaluate
from calcline.formatting import format_value, render_error

log = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Counts for one run of the host loop."""

    evaluated: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


def prompt_lines(console: Console, prompt: str) -> Iterator[str]:
    """Yield lines typed at ``prompt`` until end of input or Ctrl-C."""
    while True:
        try:
            yield console.input(Text(prompt))
        except (EOFError, KeyboardInterrupt):
            console.print()
            return


def run_lines(
    lines: Iterable[str],
    out: Console,
    err: Console,
    settings: Optional[Settings] = None,
) -> SessionStats:
    """Evaluate each line and report results.

    Args:
        lines: Source of input lines (prompt, file, or argument list).
        out: Console receiving computed values.
        err: Console receiving diagnostics.
        settings: Evaluator limits and output precision.

    Returns:
        SessionStats for the lines consumed.
    """
    settings = settings or Settings()
    stats = SessionStats()

    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip():
            stats.skipped += 1
            continue

        result = evaluate(line, settings)
        stats.evaluated += 1
        if result.ok:
            out.print(format_value(result.value, settings.precision), markup=False, highlight=False)
        else:
            stats.failed += 1
            err.print(render_error(result), highlight=False)

    log.info(
        "Session done: %d evaluated, %d failed, %d blank",
        stats.evaluated, stats.failed, stats.skipped,
    )
    return stats


def run_repl(
    settings: Optional[Settings] = None,
    out: Optional[Console] = None,
    err: Optional[Console] = None,
) -> SessionStats:
    """Interactive loop; re-prompts until end of input."""
    settings = settings or Settings()
    out = out or Console()
    err = err or Console(stderr=True)
    return run_lines(prompt_lines(out, settings.prompt), out, err, settings)
