"""Shared pytest fixtures and test doubles for factctl tests."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from factctl.commands._context import AppContext
from factctl.domain.errors import FetchError
from factctl.services.result import ServiceResult

BEES = "Bees can recognize human faces."


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's FACTCTL_* environment out of the tests."""
    for var in (
        "FACTCTL_CONFIG",
        "FACTCTL_JSON_OUTPUT",
        "FACTCTL_QUIET",
        "FACTCTL_VERBOSE",
        "FACTCTL_FETCH__URL",
        "FACTCTL_FETCH__TIMEOUT",
        "FACTCTL_SCHEDULE__INTERVAL",
        "FACTCTL_SCHEDULE__OVERLAP",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the root handler the CLI installs on every invocation."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("factctl").setLevel(logging.NOTSET)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory so no factctl.toml is discovered."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------------


class FactEndpoint:
    """httpx.MockTransport handler that counts requests.

    *replies* is cycled through; each item is either a JSON-able payload,
    an ``httpx.Response``, or an exception instance to raise.
    """

    def __init__(self, *replies: object) -> None:
        self.replies = list(replies) or [{"id": "1", "text": BEES}]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        reply = self.replies[len(self.requests) % len(self.replies)]
        self.requests.append(request)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, content=json.dumps(reply).encode())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fact_endpoint() -> Callable[..., FactEndpoint]:
    """Factory for :class:`FactEndpoint` handlers."""
    return FactEndpoint


@pytest.fixture
def fake_cli_endpoint(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FactEndpoint]:
    """Route every receiver the CLI builds to a FactEndpoint."""

    def install(*replies: object) -> FactEndpoint:
        endpoint = FactEndpoint(*replies)
        monkeypatch.setattr(AppContext, "transport", endpoint.transport)
        return endpoint

    return install


# ---------------------------------------------------------------------------
# Receiver / sink doubles
# ---------------------------------------------------------------------------


class StubReceiver:
    """Receiver returning *text* after *delay* seconds, or raising *error*."""

    def __init__(
        self,
        text: str = BEES,
        *,
        delay: float = 0.0,
        error: FetchError | None = None,
    ) -> None:
        self.text = text
        self.delay = delay
        self.error = error
        self.calls = 0

    async def fetch_fact(self) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


class RecordingSink:
    """Sink that keeps every reported result with its monotonic timestamp."""

    def __init__(self) -> None:
        self.results: list[ServiceResult] = []
        self.times: list[float] = []

    def report(self, result: ServiceResult) -> None:
        self.results.append(result)
        self.times.append(time.monotonic())

    @property
    def lines(self) -> list[str]:
        return [r.data["text"] for r in self.results if r.ok]

    @property
    def errors(self) -> list[ServiceResult]:
        return [r for r in self.results if not r.ok]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def stub_receiver() -> type[StubReceiver]:
    return StubReceiver
