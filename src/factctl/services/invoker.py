"""CommandInvoker: owns the recurring schedule, decoupled from the work.

``start()`` arms one timer and returns a :class:`ScheduledTask` handle.
Tick *k* fires no earlier than ``k * seconds`` after ``start()``; the
schedule is anchored to the start time so sleep jitter never accumulates.
Each tick runs ``command.execute()`` as its own asyncio task, so a slow
tick does not delay the next one (unless the overlap policy is ``skip``).

INVARIANT: A failed tick never affects subsequent scheduling.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from factctl.domain.errors import InvokerStateError
from factctl.domain.lifecycle import InvokerState, OverlapPolicy, is_valid_transition
from factctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from types import TracebackType

    from factctl.plugins.manager import PluginManager
    from factctl.services.command import Command

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5


@dataclass
class TickStats:
    """Running counters for one ScheduledTask."""

    fired: int = 0
    skipped: int = 0
    succeeded: int = 0
    failed: int = 0
    cancelled: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class ScheduledTask:
    """Handle for a running schedule. Returned by :meth:`CommandInvoker.start`.

    The handle owns the timer task and every in-flight tick task. Release
    it with :meth:`stop`, or use it as an async context manager::

        async with invoker.start() as task:
            await asyncio.sleep(10)
    """

    def __init__(self, invoker: CommandInvoker) -> None:
        self._invoker = invoker
        self._driver: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[ServiceResult]] = set()
        self._started_at = 0.0
        self._last_result: ServiceResult | None = None
        self.stats = TickStats()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._driver is not None and not self._driver.done()

    @property
    def in_flight(self) -> int:
        """Number of ticks whose command has not settled yet."""
        return len(self._in_flight)

    @property
    def last_result(self) -> ServiceResult | None:
        """Result of the most recently settled tick."""
        return self._last_result

    async def stop(self, *, drain: bool = True) -> None:
        """Cancel the timer; settle or cancel in-flight ticks.

        With *drain* the call waits for every in-flight tick to finish.
        Without it the in-flight ticks are cancelled. Calling ``stop()``
        on an already stopped handle is a no-op.
        """
        if self._invoker.state == InvokerState.STOPPED:
            return
        self._invoker._transition(InvokerState.STOPPED)

        if self._driver is not None:
            self._driver.cancel()
            try:
                await self._driver
            except asyncio.CancelledError:
                pass

        pending = list(self._in_flight)
        if not drain:
            for task in pending:
                task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        logger.debug("Invoker stopped: %s", self.stats.to_dict())

    def summary(self) -> ServiceResult:
        """Summarise the run as a ServiceResult (used by ``factctl run``)."""
        return ServiceResult(
            ok=self.stats.failed == 0,
            op="run",
            data={
                "interval": self._invoker.seconds,
                "overlap": str(self._invoker.overlap),
                **self.stats.to_dict(),
            },
            error=(
                ServiceError(
                    code="TICKS_FAILED",
                    message=f"{self.stats.failed} of {self.stats.fired} ticks failed",
                )
                if self.stats.failed
                else None
            ),
        )

    async def __aenter__(self) -> ScheduledTask:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop(drain=exc_type is None)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _arm(self) -> None:
        loop = asyncio.get_running_loop()
        self._started_at = loop.time()
        self._driver = loop.create_task(self._drive(), name="factctl-invoker")

    async def _drive(self) -> None:
        """Sleep until each scheduled tick time, then fire it."""
        loop = asyncio.get_running_loop()
        interval = self._invoker.seconds
        tick = 0
        while True:
            tick += 1
            delay = self._started_at + tick * interval - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            self._fire(tick)

    def _fire(self, tick: int) -> None:
        if self._invoker.overlap == OverlapPolicy.SKIP and self._in_flight:
            self.stats.skipped += 1
            logger.info("Skipping tick %d: %d tick(s) still in flight", tick, len(self._in_flight))
            return

        self.stats.fired += 1
        logger.debug("Tick %d fired", tick)
        task = asyncio.create_task(self._run_tick(tick), name=f"factctl-tick-{tick}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run_tick(self, tick: int) -> ServiceResult:
        command = self._invoker.command
        try:
            result = await command.execute()
        except asyncio.CancelledError:
            self.stats.cancelled += 1
            raise
        except Exception as exc:
            logger.exception("Tick %d: command %s raised", tick, command.op)
            result = ServiceResult(
                ok=False,
                op=command.op,
                error=ServiceError(
                    code="UNEXPECTED_ERROR",
                    message=str(exc) or type(exc).__name__,
                    detail={"exception": type(exc).__name__},
                ),
            )

        if result.ok:
            self.stats.succeeded += 1
        else:
            self.stats.failed += 1
            logger.info("Tick %d failed: %s", tick, result.error.message if result.error else "")

        result = result.model_copy(update={"meta": {**(result.meta or {}), "tick": tick}})
        self._last_result = result
        self._invoker._dispatch_tick(tick, result)
        return result


class CommandInvoker:
    """Run a command every *seconds* seconds.

    Parameters:
        command: Any object satisfying the Command protocol.
        seconds: Interval between ticks. Must be positive.
        overlap: ``allow`` lets ticks overlap; ``skip`` drops a tick whose
            predecessor is still running.
        plugin_manager: Optional plugins receiving ``post_tick``.
    """

    def __init__(
        self,
        command: Command,
        seconds: float = DEFAULT_INTERVAL,
        *,
        overlap: OverlapPolicy | str = OverlapPolicy.ALLOW,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        if seconds <= 0:
            msg = f"Interval must be positive, got {seconds!r}"
            raise ValueError(msg)
        self.command = command
        self.seconds = seconds
        self.overlap = OverlapPolicy(overlap)
        self._pm = plugin_manager
        self._state = InvokerState.CREATED
        self._task: ScheduledTask | None = None

    @property
    def state(self) -> InvokerState:
        return self._state

    @property
    def task(self) -> ScheduledTask | None:
        """The handle returned by :meth:`start`, if started."""
        return self._task

    def start(self) -> ScheduledTask:
        """Arm the recurring timer. Must be called from a running event loop.

        Raises:
            InvokerStateError: the invoker was already started.
        """
        asyncio.get_running_loop()
        self._transition(InvokerState.RUNNING)
        self._task = ScheduledTask(self)
        self._task._arm()
        logger.debug(
            "Invoker started: op=%s interval=%ss overlap=%s",
            self.command.op,
            self.seconds,
            self.overlap,
        )
        return self._task

    def _transition(self, target: InvokerState) -> None:
        if not is_valid_transition(self._state, target):
            msg = f"Cannot move invoker from {self._state} to {target}"
            raise InvokerStateError(msg)
        self._state = target

    def _dispatch_tick(self, tick: int, result: ServiceResult) -> None:
        """Call the ``post_tick`` hook. Plugin failures are warnings."""
        if self._pm is None:
            return
        payload: dict[str, Any] = {"tick": tick, "ok": result.ok}
        try:
            self._pm.hook.post_tick(**payload)
        except Exception:
            logger.warning("post_tick hook failed for tick %d", tick, exc_info=True)
