"""High-level async client for the Mercedes-Benz vehicle data API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pymbapi._api.containers import fetch_vehicle_data
from pymbapi._transport import HttpTransport, Transport
from pymbapi.catalog import ResourceCatalog
from pymbapi.config import MercedesConfig
from pymbapi.dispatcher import RequestDispatcher
from pymbapi.exceptions import MbEndpointNotSupportedError, MbError
from pymbapi.models.catalog import CatalogState
from pymbapi.models.custom_data import CustomDataRecord
from pymbapi.models.token import TokenState
from pymbapi.models.vehicle import Capabilities, CarDataSnapshot, VehicleData
from pymbapi.session import AuthSession, TokenCallback

_logger = logging.getLogger(__name__)

CAPABILITIES = Capabilities()


class MercedesClient:
    """Async client for one BYOCAR vehicle.

    Usage::

        async with MercedesClient(config, on_token_refresh=save) as client:
            await client.login()
            if await client.is_awake():
                snapshot = await client.get_all_data()

    Requests are issued one at a time.  A client instance is meant for a
    single poller; it does no locking of its own.
    """

    def __init__(
        self,
        config: MercedesConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_token_refresh: TokenCallback | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._custom_transport = transport
        self._auth = AuthSession(
            config.credentials(),
            auth_base_url=config.auth_base_url,
            on_token_refresh=on_token_refresh,
        )
        self._dispatcher: RequestDispatcher | None = None
        self._catalog: ResourceCatalog | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MercedesClient:
        transport = self._custom_transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._http_session)
        self._dispatcher = RequestDispatcher(transport, self._auth, default_timeout=self._config.request_timeout)
        self._catalog = ResourceCatalog(self._dispatcher, self._config)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._dispatcher = None
        self._catalog = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_dispatcher(self) -> RequestDispatcher:
        if self._dispatcher is None:
            raise MbError("Client not initialized. Use 'async with MercedesClient(...) as client:'")
        return self._dispatcher

    def _require_catalog(self) -> ResourceCatalog:
        if self._catalog is None:
            raise MbError("Client not initialized. Use 'async with MercedesClient(...) as client:'")
        return self._catalog

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> MercedesConfig:
        return self._config

    @property
    def capabilities(self) -> Capabilities:
        return CAPABILITIES

    @property
    def tokens(self) -> TokenState:
        return self._auth.tokens

    @property
    def is_authenticating(self) -> bool:
        return self._auth.is_authenticating

    @property
    def catalog(self) -> CatalogState:
        """Discovered resources (empty until the client is entered)."""
        if self._catalog is None:
            return CatalogState()
        return self._catalog.state

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> bool:
        """Obtain an access token from the configured refresh token."""
        return await self._auth.login(self._require_dispatcher())

    async def refresh_login(self) -> bool:
        """Rotate the token pair."""
        return await self._auth.refresh(self._require_dispatcher())

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def is_awake(self) -> bool:
        """Check the API is reachable by (re)discovering available resources.

        The BYOCAR API has no sleep state; a successful resource-list
        request stands in for "awake".
        """
        awake = await self._require_catalog().discover_with_retries()
        if awake:
            _logger.debug("Awake state checked, we are awake")
        return awake

    async def get_vehicle_data(self) -> VehicleData | None:
        """Door lock state and odometer, or ``None`` if no container answered."""
        return await fetch_vehicle_data(self._require_dispatcher(), self._config)

    async def get_custom_data(self) -> list[CustomDataRecord]:
        """Values of every discovered resource.  Call :meth:`is_awake` first."""
        if not self.capabilities.has_custom_data:
            return []
        return await self._require_catalog().extract_all()

    async def get_all_data(self) -> CarDataSnapshot:
        """Vehicle status plus all custom resource values."""
        vehicle = await self.get_vehicle_data()
        custom_data = await self.get_custom_data()
        return CarDataSnapshot(vehicle=vehicle, custom_data=custom_data)

    # ------------------------------------------------------------------
    # Not offered by the BYOCAR API
    # ------------------------------------------------------------------

    async def get_location_data(self) -> None:
        raise MbEndpointNotSupportedError("Location data is not available for Mercedes-Benz vehicles")

    async def get_charge_data(self) -> None:
        raise MbEndpointNotSupportedError("Charge data is not available for Mercedes-Benz vehicles")

    async def get_climate_data(self) -> None:
        raise MbEndpointNotSupportedError("Climate data is not available for Mercedes-Benz vehicles")

    async def send_command(self, command: str, parameter: str = "") -> None:
        raise MbEndpointNotSupportedError(f"Command {command!r} is not supported for Mercedes-Benz vehicles")
