"""Command: tokenize rule specs the way the builder does."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulesets.commands._base import RulesCommand

if TYPE_CHECKING:
    from rulesets.commands._context import AppContext


@click.command(
    cls=RulesCommand,
    examples="""\
  rulesets normalize "required|string|max:255"
  rulesets normalize "nullable" "email|max:64" --field email
  rulesets normalize "regex:/^(foo|bar)$/" "string"
  rulesets --json normalize "required||string" """,
)
@click.argument("specs", nargs=-1)
@click.option("--field", default="field", show_default=True, help="Field name to report.")
@click.pass_obj
def normalize(app: AppContext, specs: tuple[str, ...], field: str) -> None:
    """Split, flatten, and deduplicate rule SPECS."""
    app.emit(app.service.normalize(list(specs), field=field))
