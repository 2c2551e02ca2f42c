"""Request dispatch: authorization headers and HTTP status policy.

Every call to the vehicle data API and the token endpoint goes through
:meth:`RequestDispatcher.dispatch`, which never raises.  The HTTP status
is mapped onto a :class:`~pymbapi.models.dispatch.DispatchOutcome`:

====================  =======================================
Status                Outcome
====================  =======================================
200                   ``SUCCESS`` (body decoded as JSON)
204                   ``NO_CONTENT`` (body not decoded)
400, 401              ``REAUTH_REQUIRED`` (refresh triggered)
429                   ``RATE_LIMITED``
500, 503              ``SERVICE_UNAVAILABLE``
anything else         ``FATAL``
====================  =======================================

A 400/401 outside of an authentication attempt awaits one token refresh
before returning.  The original request is not retried.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pymbapi._constants import DEFAULT_TIMEOUT
from pymbapi._redact import redact_for_log
from pymbapi._transport import Transport
from pymbapi.exceptions import (
    MbApiError,
    MbAuthenticationError,
    MbError,
    MbMalformedResponseError,
    MbNoCredentialsError,
    MbRateLimitError,
    MbServiceUnavailableError,
)
from pymbapi.models.dispatch import DispatchOutcome, DispatchResult

if TYPE_CHECKING:
    from pymbapi.session import AuthSession

_logger = logging.getLogger(__name__)

SUPPORTED_METHODS: frozenset[str] = frozenset({"GET", "POST"})


def _is_json(body: str) -> bool:
    try:
        json.loads(body)
    except ValueError:
        return False
    return True


def _failure(outcome: DispatchOutcome, error: MbError, status_code: int | None = None) -> DispatchResult:
    return DispatchResult(outcome=outcome, status_code=status_code, error=error)


class RequestDispatcher:
    """Send requests on behalf of one :class:`~pymbapi.session.AuthSession`."""

    def __init__(
        self,
        transport: Transport,
        auth: AuthSession,
        *,
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._auth = auth
        self._default_timeout = default_timeout

    @property
    def auth(self) -> AuthSession:
        return self._auth

    @property
    def default_timeout(self) -> float:
        return self._default_timeout

    async def dispatch(
        self,
        method: str,
        url: str,
        body: str | None = None,
        extra_headers: Mapping[str, str] | None = None,
        *,
        requires_auth: bool = True,
        timeout: float | None = None,
    ) -> DispatchResult:
        """Send one request and classify the response.

        Parameters
        ----------
        method : str
            ``"GET"`` or ``"POST"``.
        url : str
            Absolute URL.
        body : str or None
            Request body.  A JSON content type is added when it parses
            as JSON.
        extra_headers : Mapping or None
            Headers sent in addition to the generated ones.
        requires_auth : bool
            Attach the bearer token.  The request is refused without
            network traffic when no access token is held.
        timeout : float or None
            Per-request timeout; defaults to ``default_timeout``.

        Returns
        -------
        DispatchResult
            Never raises; transport and decode errors become ``FATAL``.
        """
        try:
            return await self._dispatch(method, url, body, extra_headers, requires_auth, timeout)
        except MbError as exc:
            _logger.error("Error sending request to %s: %s", url, exc)
            return _failure(DispatchOutcome.FATAL, exc, getattr(exc, "status_code", None))
        except Exception as exc:  # noqa: BLE001
            _logger.error("Unexpected error sending request to %s", url, exc_info=True)
            return _failure(DispatchOutcome.FATAL, MbError(f"Unexpected error for {url}: {exc}"))

    async def _dispatch(
        self,
        method: str,
        url: str,
        body: str | None,
        extra_headers: Mapping[str, str] | None,
        requires_auth: bool,
        timeout: float | None,
    ) -> DispatchResult:
        tokens = self._auth.tokens
        if requires_auth and not tokens.has_access_token:
            _logger.error("No access token available for %s", url)
            return _failure(
                DispatchOutcome.FATAL,
                MbNoCredentialsError("No access token available; login first", endpoint=url),
            )

        method = method.upper()
        if method not in SUPPORTED_METHODS:
            _logger.error("Unknown method specified: %s", method)
            return _failure(DispatchOutcome.FATAL, MbApiError(f"Unsupported method {method}", endpoint=url))

        headers: dict[str, str] = dict(extra_headers or {})
        if body and _is_json(body):
            headers["Content-Type"] = "application/json"
        if requires_auth:
            headers["Authorization"] = f"Bearer {tokens.access_token}"

        effective_timeout = self._default_timeout if not timeout else timeout

        _logger.debug("Performing %s request to %s headers=%s", method, url, redact_for_log(headers))
        response = await self._transport.request(
            method,
            url,
            data=body,
            headers=headers,
            timeout=effective_timeout,
        )
        status = response.status
        _logger.debug("Performed request to %s: (%d) %d bytes", url, status, len(response.text))

        if status == 200:
            return self._decode(url, status, response.text)

        if status == 204:
            _logger.info("Received (204) No Content for %s, likely no activity in the last 12 hours", url)
            return DispatchResult(outcome=DispatchOutcome.NO_CONTENT, status_code=status)

        if status in (400, 401):
            error = MbAuthenticationError(f"HTTP {status} from {url}", status_code=status, endpoint=url)
            if self._auth.is_authenticating:
                _logger.info("Received %d during authorisation, aborting", status)
            else:
                _logger.info("Received %d, trying to (re)authorize", status)
                await self._auth.refresh(self)
            return _failure(DispatchOutcome.REAUTH_REQUIRED, error, status)

        if status == 429:
            _logger.info("Received 429, too many requests; back off before retrying")
            return _failure(
                DispatchOutcome.RATE_LIMITED,
                MbRateLimitError(f"HTTP 429 from {url}", status_code=status, endpoint=url),
                status,
            )

        if status in (500, 503):
            _logger.info("Received %d, service is not available", status)
            return _failure(
                DispatchOutcome.SERVICE_UNAVAILABLE,
                MbServiceUnavailableError(f"HTTP {status} from {url}", status_code=status, endpoint=url),
                status,
            )

        _logger.info("Received unhandled HTTP return code %d", status)
        return _failure(
            DispatchOutcome.FATAL,
            MbApiError(f"Unhandled HTTP {status} from {url}", status_code=status, endpoint=url),
            status,
        )

    @staticmethod
    def _decode(url: str, status: int, text: str) -> DispatchResult:
        if not text:
            _logger.error("Received an empty response from %s (HTTP %d)", url, status)
            return _failure(
                DispatchOutcome.FATAL,
                MbMalformedResponseError(f"Empty response body from {url}", endpoint=url),
                status,
            )
        try:
            decoded: Any = json.loads(text)
        except json.JSONDecodeError:
            _logger.error("Failed to decode JSON response from %s (HTTP %d)", url, status)
            return _failure(
                DispatchOutcome.FATAL,
                MbMalformedResponseError(f"Invalid JSON from {url}: {text[:200]}", endpoint=url),
                status,
            )
        return DispatchResult(outcome=DispatchOutcome.SUCCESS, body=decoded, status_code=status)
