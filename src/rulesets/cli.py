"""Root CLI group for rulesets with global flags and command registration."""

from __future__ import annotations

import click

from rulesets import __version__
from rulesets.commands import register_commands
from rulesets.commands._context import AppContext
from rulesets.config.settings import RulesetSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rulesets")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--merge-equality",
    type=click.Choice(["strict", "loose"]),
    default=None,
    help="Dedup policy when merging into existing rules.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    merge_equality: str | None,
) -> None:
    """rulesets — compose and normalize validation rules."""
    ctx.ensure_object(dict)
    settings = RulesetSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        builder={"merge_equality": merge_equality} if merge_equality else None,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
