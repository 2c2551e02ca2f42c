"""HTTP transport returning structured status codes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import aiohttp

from pymbapi.exceptions import MbTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Raw HTTP response: status code, body text and headers."""

    status: int
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """Structural transport interface used by the dispatcher.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    Implementations raise :class:`MbTransportError` when no HTTP
    response was received.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        data: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """`aiohttp` implementation of :class:`Transport`.

    Every status code is returned to the caller; interpreting it is
    the dispatcher's job.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def request(
        self,
        method: str,
        url: str,
        *,
        data: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float,
    ) -> TransportResponse:
        client_timeout = aiohttp.ClientTimeout(total=timeout, connect=timeout)
        _logger.debug("%s %s (timeout=%ss)", method, url, timeout)
        try:
            async with self._http.request(
                method,
                url,
                data=data,
                headers=dict(headers or {}),
                timeout=client_timeout,
            ) as resp:
                text = await resp.text()
                return TransportResponse(
                    status=resp.status,
                    text=text,
                    headers=dict(resp.headers),
                )
        except aiohttp.ClientError as exc:
            raise MbTransportError(f"{method} {url} failed: {exc}", endpoint=url) from exc
        except asyncio.TimeoutError as exc:
            raise MbTransportError(f"{method} {url} timed out after {timeout}s", endpoint=url) from exc
