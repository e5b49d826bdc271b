"""Receivers: the units of external work a command delegates to.

A receiver performs exactly one outbound call per invocation. There is
no caching and no retry; the transport timeout bounds every call.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from factctl.domain.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_FACT_URL = "https://uselessfacts.jsph.pl/api/v2/facts/random"
DEFAULT_TIMEOUT = 10.0


@runtime_checkable
class FactReceiver(Protocol):
    """Anything that can asynchronously produce one fact string."""

    async def fetch_fact(self) -> str: ...


class RandomFactReceiver:
    """Fetch a random fact from a JSON endpoint.

    The endpoint must answer a plain GET with a JSON object holding a
    non-empty ``text`` string.

    Parameters:
        url: Endpoint to query.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        url: str = DEFAULT_FACT_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch_fact(self) -> str:
        """Perform one GET and return the fact text.

        Raises:
            FetchError: malformed URL, transport failure, non-2xx status,
                or a payload without a usable ``text`` field.
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            try:
                response = await client.get(self.url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise FetchError(
                    f"Request to {self.url} failed: {exc}",
                    code=FetchError.FETCH_FAILED,
                    cause=exc,
                    detail={"url": self.url},
                ) from exc

        logger.debug("GET %s -> %s", self.url, response.status_code)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"{self.url} answered with status {response.status_code}",
                code=FetchError.HTTP_STATUS,
                cause=exc,
                detail={"url": self.url, "status": response.status_code},
            ) from exc

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise FetchError(
                f"Response from {self.url} is not valid JSON",
                code=FetchError.INVALID_PAYLOAD,
                cause=exc,
                detail={"url": self.url},
            ) from exc

        return _extract_text(payload, self.url)


def _extract_text(payload: Any, url: str) -> str:
    """Pull the ``text`` field out of a decoded payload."""
    text = payload.get("text") if isinstance(payload, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise FetchError(
            f"Response from {url} has no usable 'text' field",
            code=FetchError.INVALID_PAYLOAD,
            detail={"url": url},
        )
    return text
