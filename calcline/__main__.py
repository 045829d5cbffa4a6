"""CLI for the calcline calculator.

Usage:
    python -m calcline repl                      # Interactive prompt
    python -m calcline eval "2 + 3 * 4" "2^10"   # Evaluate arguments
    python -m calcline eval -- "-5 + 3"          # Leading minus needs --
    python -m calcline file exprs.txt            # One expression per line
    cat exprs.txt | python -m calcline file -    # Read stdin
    python -m calcline -vv eval "(1 + 2"         # Debug logging on stderr
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console

from calcline.config import Settings
from calcline.logs import configure_logging, level_from_verbosity
from calcline.repl import run_lines, run_repl

app = typer.Typer(
    name="calcline",
    help="Evaluate arithmetic expressions one line at a time",
    no_args_is_help=True,
)
console = Console(stderr=True)
out = Console()


def _load_settings(**overrides) -> Settings:
    """Settings from CALCLINE_* env vars with CLI overrides applied."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2)
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **changes)


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for info, -vv for debug logging"),
) -> None:
    """Evaluate arithmetic expressions one line at a time."""
    configure_logging(level_from_verbosity(verbose), console=console)


@app.command("repl")
def cmd_repl(
    prompt: Optional[str] = typer.Option(None, "--prompt", help="Prompt text (default '> ')"),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", min=1, help="Significant digits in results"),
) -> None:
    """Read expressions interactively until end of input."""
    settings = _load_settings(prompt=prompt, precision=precision)
    run_repl(settings, out=out, err=console)


@app.command("eval")
def cmd_eval(
    expressions: list[str] = typer.Argument(help="Expressions to evaluate"),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", min=1, help="Significant digits in results"),
) -> None:
    """Evaluate each argument and print one result per line."""
    settings = _load_settings(precision=precision)
    stats = run_lines(expressions, out, console, settings)
    if not stats.ok:
        raise typer.Exit(1)


@app.command("file")
def cmd_file(
    source: typer.FileText = typer.Argument(help="File with one expression per line ('-' for stdin)"),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", min=1, help="Significant digits in results"),
) -> None:
    """Evaluate every non-blank line of a file."""
    settings = _load_settings(precision=precision)
    stats = run_lines(source, out, console, settings)
    if not stats.ok:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
