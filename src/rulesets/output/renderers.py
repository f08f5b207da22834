"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rulesets.output.console import create_console, get_output, style_for_rule

if TYPE_CHECKING:
    from rich.console import Console

    from rulesets.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, width: int | None = None) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(width=width)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    tokens = result.data.get("tokens")
    if isinstance(tokens, list):
        return "|".join(str(token) for token in tokens)

    rules = result.data.get("rules")
    if isinstance(rules, dict):
        return "\n".join(rules)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="rs.ok")
    op = Text(f"  {result.op}", style="rs.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="rs.key")
    if isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":"), default=str))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _rule_text(rules: list[Any]) -> Text:
    text = Text()
    for i, rule in enumerate(rules):
        if i:
            text.append(" | ", style="rs.key")
        text.append(str(rule), style=style_for_rule(rule))
    return text


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_normalize(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "field", data.get("field", ""))
    tokens = data.get("tokens", [])
    console.print(Text("  rules:", style="rs.key"), _rule_text(tokens), end="")
    console.print()
    _field(console, "count", data.get("count", len(tokens)))
    if verbose:
        _render_meta(console, result)


def _render_show(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "target", data.get("target", ""))
    rules: dict[str, list[Any]] = data.get("rules", {})
    attributes: dict[str, str] = data.get("attributes", {})
    messages: dict[str, str] = data.get("messages", {})

    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("Field", style="rs.field", no_wrap=True)
    table.add_column("Label")
    table.add_column("Rules")
    for field, field_rules in rules.items():
        table.add_row(field, attributes.get(field, ""), _rule_text(field_rules))
    console.print(table)

    if messages:
        console.print(Text("  messages:", style="rs.key"))
        for key, message in messages.items():
            console.print(f"    {key}: {message}", markup=False)

    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    label = Text("ERROR", style="rs.error")
    op = Text(f"  {result.op}", style="rs.op")
    console.print(label, op, end="")
    console.print()
    if result.error is None:
        console.print("  Unknown error")
        return
    console.print(f"  {result.error.message}", markup=False)
    console.print(Text(f"  code: {result.error.code}", style="rs.key"))
    if verbose:
        for key, value in result.error.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "normalize": _render_normalize,
    "show": _render_show,
}
