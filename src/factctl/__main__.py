"""Allow ``python -m factctl``."""

from factctl.cli import cli

cli()
