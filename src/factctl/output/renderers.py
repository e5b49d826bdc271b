"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from factctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from factctl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

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
    if "text" in result.data:
        return str(result.data["text"])
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="fact.ok")
    op = Text(f"  {result.op}", style="fact.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="fact.key")
    v = Text(str(value), style="fact.count" if isinstance(value, int) else "")
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    for k, v in result.meta.items():
        console.print(Text(f"  {k}: {v}", style="dim"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fact.error")
    op = Text(f"  {result.op}", style="fact.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_fact(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """One line per fact, nothing else (stdout is meant to be piped)."""
    console.print(Text(str(result.data.get("text", "")), style="fact.text"))
    if verbose:
        _render_meta(console, result)


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("interval", "overlap", "fired", "succeeded", "failed", "skipped", "cancelled"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "print_random_fact": _render_fact,
    "run": _render_run,
}
