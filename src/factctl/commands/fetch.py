"""Command: fetch and print a single fact."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from factctl.commands._base import FactCommand

if TYPE_CHECKING:
    from factctl.commands._context import AppContext


@click.command(
    cls=FactCommand,
    examples="""\
  factctl fetch
  factctl --json fetch
  factctl fetch --url https://uselessfacts.jsph.pl/api/v2/facts/today""",
)
@click.option("--url", default=None, help="Override the fact endpoint.")
@click.pass_obj
def fetch(app: AppContext, url: str | None) -> None:
    """Fetch one random fact and print it."""
    command = app.build_command(url=url)
    result = asyncio.run(command.execute())
    # The command already reported to the console sink.
    if not result.ok:
        raise SystemExit(1)
