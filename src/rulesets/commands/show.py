"""Command: display the normalized rules of a ruleset class."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulesets.commands._base import RulesCommand

if TYPE_CHECKING:
    from rulesets.commands._context import AppContext


@click.command(
    cls=RulesCommand,
    examples="""\
  rulesets show app.rulesets:UserRuleset
  rulesets --json show app.rulesets:UserRuleset
  rulesets --merge-equality loose show app.rulesets:LegacyRuleset""",
)
@click.argument("target")
@click.pass_obj
def show(app: AppContext, target: str) -> None:
    """Import TARGET (module:Class) and show its rules, messages, and labels."""
    app.emit(app.service.show(target))
