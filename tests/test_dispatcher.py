from __future__ import annotations

import pytest
from conftest import AUTH_BASE_URL, TOKEN_URL, FakeTransport, StubAuth, json_response

from pymbapi._transport import TransportResponse
from pymbapi.dispatcher import RequestDispatcher
from pymbapi.exceptions import (
    MbApiError,
    MbAuthenticationError,
    MbMalformedResponseError,
    MbNoCredentialsError,
    MbRateLimitError,
    MbServiceUnavailableError,
    MbTransportError,
)
from pymbapi.models.credentials import Credentials
from pymbapi.models.dispatch import DispatchOutcome
from pymbapi.session import AuthSession

URL = "https://api.example.test/vehicledata/v1/vehicles/VIN-1/resources"


def _dispatcher(transport: FakeTransport, auth: StubAuth | None = None) -> RequestDispatcher:
    return RequestDispatcher(transport, auth or StubAuth())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_200_decodes_body(transport: FakeTransport) -> None:
    transport.add(URL, json_response([{"name": "odo"}]))

    result = await _dispatcher(transport).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.SUCCESS
    assert result.ok
    assert result.body == [{"name": "odo"}]
    assert result.status_code == 200


@pytest.mark.asyncio
async def test_204_returns_no_content_without_decoding(transport: FakeTransport) -> None:
    transport.add(URL, TransportResponse(status=204, text="<not json>"))

    result = await _dispatcher(transport).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.NO_CONTENT
    assert result.ok
    assert result.body is None
    assert result.error is None


@pytest.mark.parametrize(
    ("status", "outcome", "error_type"),
    [
        (429, DispatchOutcome.RATE_LIMITED, MbRateLimitError),
        (500, DispatchOutcome.SERVICE_UNAVAILABLE, MbServiceUnavailableError),
        (503, DispatchOutcome.SERVICE_UNAVAILABLE, MbServiceUnavailableError),
        (403, DispatchOutcome.FATAL, MbApiError),
        (404, DispatchOutcome.FATAL, MbApiError),
        (502, DispatchOutcome.FATAL, MbApiError),
        (301, DispatchOutcome.FATAL, MbApiError),
    ],
)
@pytest.mark.asyncio
async def test_status_code_policy(
    transport: FakeTransport,
    status: int,
    outcome: DispatchOutcome,
    error_type: type[Exception],
) -> None:
    transport.add(URL, TransportResponse(status=status, text="{}"))
    auth = StubAuth()

    result = await _dispatcher(transport, auth).dispatch("GET", URL)

    assert result.outcome is outcome
    assert not result.ok
    assert type(result.error) is error_type
    assert result.status_code == status
    assert auth.refresh_calls == 0


@pytest.mark.parametrize("status", [400, 401])
@pytest.mark.asyncio
async def test_unauthorized_triggers_exactly_one_refresh(transport: FakeTransport, status: int) -> None:
    transport.add(URL, TransportResponse(status=status, text=""))
    auth = StubAuth()

    result = await _dispatcher(transport, auth).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.REAUTH_REQUIRED
    assert isinstance(result.error, MbAuthenticationError)
    assert auth.refresh_calls == 1
    # The original request is not retried.
    assert len(transport.calls) == 1


@pytest.mark.parametrize("status", [400, 401])
@pytest.mark.asyncio
async def test_unauthorized_while_authenticating_does_not_refresh(transport: FakeTransport, status: int) -> None:
    transport.add(URL, TransportResponse(status=status, text=""))
    auth = StubAuth(authenticating=True)

    result = await _dispatcher(transport, auth).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.REAUTH_REQUIRED
    assert auth.refresh_calls == 0


@pytest.mark.asyncio
async def test_refresh_completes_before_dispatch_returns(transport: FakeTransport) -> None:
    transport.add(URL, TransportResponse(status=401, text=""))
    transport.add(TOKEN_URL, json_response({"access_token": "t2", "refresh_token": "r2"}))
    credentials = Credentials(account="acct", refresh_token="r1", vin="VIN-1")
    session = AuthSession(credentials, auth_base_url=AUTH_BASE_URL)
    dispatcher = RequestDispatcher(transport, session)

    # No access token yet, so seed one through a successful login.
    assert await session.login(dispatcher) is True
    result = await dispatcher.dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.REAUTH_REQUIRED
    assert [call.url for call in transport.calls] == [TOKEN_URL, URL, TOKEN_URL]
    assert session.tokens.access_token == "t2"


@pytest.mark.asyncio
async def test_missing_access_token_fails_without_request(transport: FakeTransport) -> None:
    result = await _dispatcher(transport, StubAuth(access_token="")).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.FATAL
    assert isinstance(result.error, MbNoCredentialsError)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_unauthenticated_request_needs_no_token(transport: FakeTransport) -> None:
    transport.add(URL, json_response({"ok": True}))

    result = await _dispatcher(transport, StubAuth(access_token="")).dispatch("GET", URL, requires_auth=False)

    assert result.outcome is DispatchOutcome.SUCCESS
    assert "Authorization" not in transport.calls[0].headers


@pytest.mark.asyncio
async def test_headers_bearer_and_json_content_type(transport: FakeTransport) -> None:
    transport.add(URL, json_response({}))

    await _dispatcher(transport).dispatch("POST", URL, '{"a": 1}', {"X-Trace": "1"})

    headers = transport.calls[0].headers
    assert headers["Authorization"] == "Bearer access-1"
    assert headers["Content-Type"] == "application/json"
    assert headers["X-Trace"] == "1"


@pytest.mark.asyncio
async def test_non_json_body_gets_no_json_content_type(transport: FakeTransport) -> None:
    transport.add(URL, json_response({}))

    form_headers = {"Content-Type": "application/x-www-form-urlencoded"}
    await _dispatcher(transport).dispatch("POST", URL, "a=1&b=2", form_headers)

    assert transport.calls[0].headers["Content-Type"] == "application/x-www-form-urlencoded"


@pytest.mark.asyncio
async def test_timeout_default_and_override(transport: FakeTransport) -> None:
    transport.add(URL, json_response({}))
    dispatcher = _dispatcher(transport)

    await dispatcher.dispatch("GET", URL)
    await dispatcher.dispatch("GET", URL, timeout=15)

    assert [call.timeout for call in transport.calls] == [30.0, 15]


@pytest.mark.parametrize("text", ["", "{not json"])
@pytest.mark.asyncio
async def test_200_with_empty_or_invalid_body_is_fatal(transport: FakeTransport, text: str) -> None:
    transport.add(URL, TransportResponse(status=200, text=text))

    result = await _dispatcher(transport).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.FATAL
    assert isinstance(result.error, MbMalformedResponseError)


@pytest.mark.asyncio
async def test_transport_error_is_fatal(transport: FakeTransport) -> None:
    transport.add(URL, MbTransportError("timed out", endpoint=URL))

    result = await _dispatcher(transport).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.FATAL
    assert isinstance(result.error, MbTransportError)
    assert result.status_code is None


@pytest.mark.asyncio
async def test_unexpected_exception_does_not_escape(transport: FakeTransport) -> None:
    transport.add(URL, RuntimeError("boom"))

    result = await _dispatcher(transport).dispatch("GET", URL)

    assert result.outcome is DispatchOutcome.FATAL
    assert result.error is not None


@pytest.mark.asyncio
async def test_unsupported_method_is_fatal(transport: FakeTransport) -> None:
    result = await _dispatcher(transport).dispatch("DELETE", URL)

    assert result.outcome is DispatchOutcome.FATAL
    assert transport.calls == []


@pytest.mark.asyncio
async def test_raise_for_outcome(transport: FakeTransport) -> None:
    transport.add(URL, TransportResponse(status=429, text=""))

    result = await _dispatcher(transport).dispatch("GET", URL)

    with pytest.raises(MbRateLimitError) as exc_info:
        result.raise_for_outcome()
    assert exc_info.value.status_code == 429
    assert exc_info.value.endpoint == URL
