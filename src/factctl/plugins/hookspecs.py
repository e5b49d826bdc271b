"""Pluggy hook specifications for factctl execution events.

``post_execute`` fires after every command execution, ``post_tick``
after every invoker tick. Both are dispatched synchronously on the
event loop thread.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("factctl")
hookimpl = pluggy.HookimplMarker("factctl")


class FactctlHookSpec:
    """Hook specifications for the factctl plugin system."""

    @hookspec
    def post_execute(
        self,
        op: str,
        ok: bool,
        data: dict[str, Any],
        error: dict[str, Any] | None,
    ) -> None:
        """Called after a command executes, successfully or not."""

    @hookspec
    def post_tick(self, tick: int, ok: bool) -> None:
        """Called after an invoker tick settles."""
