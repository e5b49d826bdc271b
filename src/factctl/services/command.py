"""Commands: bind a receiver to a reporting action behind ``execute()``.

The invoker only knows the :class:`Command` protocol, so it never needs
to know what kind of work a tick performs.

INVARIANT: ``execute()`` never raises for receiver failures. A
:class:`FetchError` becomes a failed :class:`ServiceResult` that is both
reported to the sink and returned to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from factctl.domain.errors import FetchError
from factctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from factctl.infrastructure.receivers import FactReceiver
    from factctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@runtime_checkable
class Command(Protocol):
    """A parameterless, asynchronous unit of work."""

    op: str

    async def execute(self) -> ServiceResult: ...


class ReportSink(Protocol):
    """Destination for command outcomes (stdout/stderr, a list in tests)."""

    def report(self, result: ServiceResult) -> None: ...


class BaseCommand:
    """Shared plumbing for concrete commands: reporting and hook dispatch.

    Subclasses set :attr:`op` and implement :meth:`execute`, finishing
    with ``return self._finish(result)``.
    """

    op: str = "execute"

    def __init__(
        self,
        sink: ReportSink,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._sink = sink
        self._pm = plugin_manager

    async def execute(self) -> ServiceResult:
        raise NotImplementedError

    def _finish(self, result: ServiceResult) -> ServiceResult:
        """Dispatch ``post_execute``, then hand *result* to the sink."""
        warnings: list[str] = []
        self._dispatch_event(
            "post_execute",
            {
                "op": result.op,
                "ok": result.ok,
                "data": dict(result.data),
                "error": result.error.model_dump() if result.error else None,
            },
            warnings,
        )
        if warnings:
            result = result.model_copy(update={"warnings": [*result.warnings, *warnings]})
        self._sink.report(result)
        return result

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._pm is None:
            return
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")


class PrintRandomFactCommand(BaseCommand):
    """Fetch one random fact and print it.

    Usage::

        receiver = RandomFactReceiver()
        command = PrintRandomFactCommand(receiver, ConsoleSink())
        result = await command.execute()
    """

    op = "print_random_fact"

    def __init__(
        self,
        receiver: FactReceiver,
        sink: ReportSink,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        super().__init__(sink, plugin_manager=plugin_manager)
        self._receiver = receiver

    @property
    def receiver(self) -> FactReceiver:
        return self._receiver

    async def execute(self) -> ServiceResult:
        try:
            text = await self._receiver.fetch_fact()
        except FetchError as exc:
            logger.warning("Fact fetch failed (%s): %s", exc.code, exc.message)
            detail = dict(exc.detail)
            if exc.cause is not None:
                detail["cause"] = f"{type(exc.cause).__name__}: {exc.cause}"
            result = ServiceResult(
                ok=False,
                op=self.op,
                error=ServiceError(code=exc.code, message=exc.message, detail=detail),
            )
        else:
            result = ServiceResult(ok=True, op=self.op, data={"text": text})
        return self._finish(result)
