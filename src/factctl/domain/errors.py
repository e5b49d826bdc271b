"""Exception types raised by receivers and the invoker."""

from __future__ import annotations

from typing import Any


class FetchError(Exception):
    """A receiver could not produce a fact.

    The underlying transport or parsing error is chained as ``__cause__``
    and also kept on :attr:`cause` so callers can report it.

    Attributes:
        code: Machine-readable failure kind (``FETCH_FAILED``,
            ``HTTP_STATUS`` or ``INVALID_PAYLOAD``).
        detail: Extra context for the error payload (url, status, ...).
    """

    FETCH_FAILED = "FETCH_FAILED"
    HTTP_STATUS = "HTTP_STATUS"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"

    def __init__(
        self,
        message: str,
        *,
        code: str = FETCH_FAILED,
        cause: BaseException | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause
        self.detail = detail or {}


class InvokerStateError(RuntimeError):
    """Illegal lifecycle operation on a CommandInvoker."""
