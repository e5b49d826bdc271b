"""Subcommand modules for factctl.

Provides register_commands() which uses deferred imports to keep
``factctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from factctl.commands.fetch import fetch
    from factctl.commands.run import run

    cli.add_command(fetch)
    cli.add_command(run)
