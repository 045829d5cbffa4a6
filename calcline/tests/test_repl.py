"""Tests for the host loop, value formatting, and settings."""

import io
import math

import pytest
from rich.console import Console

from calcline import evaluator
from calcline.config import Settings
from calcline.evaluator import evaluate
from calcline.formatting import format_value, render_error
from calcline.repl import SessionStats, prompt_lines, run_lines


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=120, color_system=None), buf


@pytest.fixture
def consoles():
    out, out_buf = _console()
    err, err_buf = _console()
    return out, out_buf, err, err_buf


# --- Host loop ---

def test_values_go_to_output(consoles):
    out, out_buf, err, err_buf = consoles
    stats = run_lines(["2+3*4\n", "(2+3)*4\n"], out, err)
    assert out_buf.getvalue().splitlines() == ["14", "20"]
    assert err_buf.getvalue() == ""
    assert stats == SessionStats(evaluated=2, failed=0, skipped=0)


def test_errors_go_to_error_console(consoles):
    out, out_buf, err, err_buf = consoles
    stats = run_lines(["2+", "1+1"], out, err)
    assert out_buf.getvalue().splitlines() == ["2"]
    assert "Could not evaluate expression" in err_buf.getvalue()
    assert "column 3" in err_buf.getvalue()
    assert stats.failed == 1
    assert not stats.ok


def test_error_caret_points_at_column(consoles):
    out, _, err, err_buf = consoles
    run_lines(["2 * abc"], out, err)
    lines = err_buf.getvalue().splitlines()
    assert lines[1] == "  2 * abc"
    assert lines[2] == "      ^"


def test_error_caret_aligned_after_tab(consoles):
    out, _, err, err_buf = consoles
    run_lines(["\tx"], out, err)
    lines = err_buf.getvalue().splitlines()
    assert "\t" not in lines[1]
    assert lines[2].index("^") == lines[1].index("x")


def test_empty_line_does_not_evaluate(consoles, monkeypatch):
    out, out_buf, err, err_buf = consoles
    calls = []
    monkeypatch.setattr("calcline.repl.evaluate", lambda *a, **kw: calls.append(a))
    stats = run_lines(["", "\n", "   \n"], out, err)
    assert calls == []
    assert stats == SessionStats(evaluated=0, failed=0, skipped=3)
    assert out_buf.getvalue() == ""
    assert err_buf.getvalue() == ""


def test_loop_continues_after_error(consoles):
    out, out_buf, err, _ = consoles
    run_lines(["(1+2", "", "--5"], out, err)
    assert out_buf.getvalue().splitlines() == ["5"]


def test_precision_setting(consoles):
    out, out_buf, err, _ = consoles
    run_lines(["1/3"], out, err, Settings(precision=3))
    assert out_buf.getvalue().strip() == "0.333"


def test_prompt_lines_stops_at_eof():
    console, buf = _console()
    answers = iter(["1+1", "2*2"])

    def fake_input(*args, **kwargs):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    console.input = fake_input
    assert list(prompt_lines(console, "> ")) == ["1+1", "2*2"]


def test_prompt_lines_stops_on_interrupt():
    console, _ = _console()

    def fake_input(*args, **kwargs):
        raise KeyboardInterrupt

    console.input = fake_input
    assert list(prompt_lines(console, "> ")) == []


# --- Formatting ---

@pytest.mark.parametrize("value, text", [
    (14.0, "14"),
    (3.14159265, "3.14159"),
    (0.1 + 0.2, "0.3"),
    (1e20, "1e+20"),
    (-2.5, "-2.5"),
    (-0.0, "0"),
    (math.inf, "inf"),
    (-math.inf, "-inf"),
    (math.nan, "nan"),
])
def test_format_value(value, text):
    assert format_value(value) == text


def test_render_error_headline_carries_detail():
    text = render_error(evaluate("(1+2"))
    assert text.plain.splitlines()[0] == "Could not evaluate expression: missing ')' (column 5)"


def test_render_error_without_detail():
    text = render_error(evaluate("1"))
    assert text.plain == "Could not evaluate expression"


def test_render_error_skips_echo_for_long_input():
    text = render_error(evaluate("1+" * 200))
    assert "\n" not in text.plain


# --- Settings ---

def test_settings_defaults_without_env():
    assert Settings.from_env({}) == Settings()


def test_settings_from_env():
    settings = Settings.from_env({
        "CALCLINE_PROMPT": "calc> ",
        "CALCLINE_PRECISION": "10",
        "CALCLINE_MAX_LENGTH": "64",
        "CALCLINE_MAX_DEPTH": "8",
    })
    assert settings == Settings(prompt="calc> ", precision=10, max_length=64, max_depth=8)


@pytest.mark.parametrize("value", ["ten", "0", "-3"])
def test_settings_rejects_bad_integers(value):
    with pytest.raises(ValueError, match="CALCLINE_PRECISION"):
        Settings.from_env({"CALCLINE_PRECISION": value})


def test_settings_reads_os_environ(monkeypatch):
    monkeypatch.setenv("CALCLINE_MAX_DEPTH", "5")
    assert Settings.from_env().max_depth == 5


def test_settings_limits_reach_evaluator():
    result = evaluator.evaluate("((1))", Settings.from_env({"CALCLINE_MAX_DEPTH": "1"}))
    assert not result.ok
