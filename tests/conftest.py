from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pymbapi._transport import TransportResponse
from pymbapi.config import MercedesConfig
from pymbapi.models.token import TokenState

VIN = "WDD2052041F000001"
BASE_URL = "https://api.example.test"
AUTH_BASE_URL = "https://auth.example.test"
TOKEN_URL = f"{AUTH_BASE_URL}/oidc10/auth/oauth/v2/token"
RESOURCES_URL = f"{BASE_URL}/vehicledata/v1/vehicles/{VIN}/resources"


def json_response(payload: Any, status: int = 200) -> TransportResponse:
    return TransportResponse(status=status, text=json.dumps(payload))


@dataclass
class RecordedCall:
    method: str
    url: str
    data: str | None
    headers: dict[str, str]
    timeout: float


@dataclass
class FakeTransport:
    """Scripted transport: each URL maps to a queue of responses.

    The last queued response is repeated once the queue is drained.  An
    exception instance in the queue is raised instead of returned.
    """

    routes: dict[str, list[TransportResponse | Exception]] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)

    def add(self, url: str, *responses: TransportResponse | Exception) -> None:
        self.routes.setdefault(url, []).extend(responses)

    def calls_to(self, url: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.url == url]

    async def request(
        self,
        method: str,
        url: str,
        *,
        data: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float,
    ) -> TransportResponse:
        self.calls.append(RecordedCall(method, url, data, dict(headers or {}), timeout))
        queue = self.routes.get(url)
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response


class StubAuth:
    """Stands in for AuthSession in dispatcher-level tests."""

    def __init__(self, access_token: str = "access-1", *, authenticating: bool = False) -> None:
        self.tokens = TokenState(access_token=access_token, refresh_token="refresh-1")
        self.is_authenticating = authenticating
        self.refresh_calls = 0

    async def refresh(self, _dispatcher: Any) -> bool:
        self.refresh_calls += 1
        return False


@pytest.fixture
def config() -> MercedesConfig:
    return MercedesConfig(
        account="client-id:client-secret",
        refresh_token="abc",
        vin=VIN,
        base_url=BASE_URL,
        auth_base_url=AUTH_BASE_URL,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
