"""Client configuration for pymbapi."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pymbapi._constants import (
    AUTH_BASE_URL,
    BASE_URL,
    DEFAULT_TIMEOUT,
    DISCOVERY_ATTEMPTS,
    DISCOVERY_TIMEOUT,
    EXPECTED_RESOURCE_VERSION,
)
from pymbapi.exceptions import MbConfigError
from pymbapi.models.credentials import Credentials


@dataclasses.dataclass(frozen=True)
class MercedesConfig:
    """Client configuration.

    Parameters
    ----------
    account : str
        Account identifier registered on the Mercedes-Benz developer
        portal.  Its base64 form is sent as HTTP Basic credentials to the
        token endpoint.
    refresh_token : str
        Initial OAuth2 refresh token.  The provider rotates it on every
        refresh, so persist the new one (see ``on_token_refresh`` on
        :class:`~pymbapi.client.MercedesClient`).
    vin : str
        Vehicle identification number of the BYOCAR vehicle.
    base_url : str
        Vehicle data API base URL.
    auth_base_url : str
        OAuth2 server base URL.
    request_timeout : float
        Default per-request timeout in seconds.
    discovery_timeout : float
        Timeout for the resource-list request.
    discovery_attempts : int
        Total attempts for the resource-list request.
    expected_resource_version : str
        Resource schema version; other versions are logged but accepted.
    """

    account: str
    refresh_token: str
    vin: str
    base_url: str = BASE_URL
    auth_base_url: str = AUTH_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    discovery_timeout: float = DISCOVERY_TIMEOUT
    discovery_attempts: int = DISCOVERY_ATTEMPTS
    expected_resource_version: str = EXPECTED_RESOURCE_VERSION

    @property
    def resource_timeout(self) -> float:
        """Timeout for single-resource fetches (half the default)."""
        return self.request_timeout / 2

    def credentials(self) -> Credentials:
        """Build the immutable credentials for an auth session."""
        return Credentials(account=self.account, refresh_token=self.refresh_token, vin=self.vin)

    @classmethod
    def from_env(cls, **overrides: Any) -> MercedesConfig:
        """Create configuration from environment variables.

        Reads ``MB_ACCOUNT``, ``MB_REFRESH_TOKEN``, ``MB_VIN`` and the
        optional ``MB_*`` tuning variables.  Explicit keyword arguments
        override environment values.

        Raises
        ------
        MbConfigError
            If the account or VIN is missing, or a numeric variable
            cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "MB_ACCOUNT": "account",
            "MB_REFRESH_TOKEN": "refresh_token",
            "MB_VIN": "vin",
            "MB_BASE_URL": "base_url",
            "MB_AUTH_BASE_URL": "auth_base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "MB_REQUEST_TIMEOUT": ("request_timeout", float),
            "MB_DISCOVERY_TIMEOUT": ("discovery_timeout", float),
            "MB_DISCOVERY_ATTEMPTS": ("discovery_attempts", int),
        }
        for env_key, (field_name, kind) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = kind(val)
            except ValueError as exc:
                raise MbConfigError(f"{env_key} is not a valid {kind.__name__}: {val!r}") from exc

        config_kwargs.update(overrides)

        for required in ("account", "vin"):
            if not config_kwargs.get(required):
                raise MbConfigError(f"Missing required setting: {required}")
        config_kwargs.setdefault("refresh_token", "")

        return cls(**config_kwargs)
