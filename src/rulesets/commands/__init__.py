"""Subcommand modules for rulesets.

Provides register_commands() which uses deferred imports to keep
``rulesets --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from rulesets.commands.normalize import normalize
    from rulesets.commands.show import show

    cli.add_command(normalize)
    cli.add_command(show)
