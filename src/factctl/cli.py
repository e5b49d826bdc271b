"""Root CLI group for factctl with global flags and command registration."""

from __future__ import annotations

import click

from factctl import __version__
from factctl.commands import register_commands
from factctl.commands._base import FactGroup
from factctl.commands._context import AppContext
from factctl.config.settings import FactSettings


@click.group(
    cls=FactGroup,
    invoke_without_command=True,
    examples="""\
  factctl fetch
  factctl run --interval 3
  factctl -v --log-json run --duration 30""",
)
@click.version_option(version=__version__, prog_name="factctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """factctl — print random facts on a schedule."""
    ctx.ensure_object(dict)
    settings = FactSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
