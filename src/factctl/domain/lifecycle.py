"""Invoker lifecycle and tick overlap policy.

An invoker moves Created -> Running -> Stopped and never returns to
Created. Each instance owns at most one timer.
"""

from __future__ import annotations

from enum import StrEnum


class InvokerState(StrEnum):
    """Lifecycle states of a CommandInvoker."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class OverlapPolicy(StrEnum):
    """What to do when a tick fires while the previous one is in flight."""

    ALLOW = "allow"
    SKIP = "skip"


INVOKER_TRANSITIONS: dict[str, list[str]] = {
    "created": ["running"],
    "running": ["stopped"],
    "stopped": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = INVOKER_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
