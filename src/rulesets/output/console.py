"""Rich Console factory and theme for rulesets output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RULESETS_THEME = Theme(
    {
        "rs.ok": "bold green",
        "rs.error": "bold red",
        "rs.warning": "bold yellow",
        "rs.op": "bold cyan",
        "rs.key": "dim",
        "rs.field": "bold",
        "rs.rule": "green",
        "rs.regex": "magenta",
        "rs.custom": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=RULESETS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_rule(rule: object) -> str:
    """Return the Rich style name for one rendered rule value."""
    if isinstance(rule, str):
        if rule.startswith("<custom:"):
            return "rs.custom"
        if rule.startswith("regex:"):
            return "rs.regex"
    return "rs.rule"
