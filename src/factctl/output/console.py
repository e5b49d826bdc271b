"""Rich Console factory and theme for factctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FACTCTL_THEME = Theme(
    {
        "fact.ok": "bold green",
        "fact.error": "bold red",
        "fact.warning": "bold yellow",
        "fact.op": "bold cyan",
        "fact.key": "dim",
        "fact.text": "bold",
        "fact.count": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width. Facts are never wrapped below 120.
    """
    return Console(
        file=StringIO(),
        theme=FACTCTL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
        soft_wrap=True,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
