"""Custom exception hierarchy for pymbapi."""

from __future__ import annotations


class MbError(Exception):
    """Base exception for all pymbapi errors."""


class MbConfigError(MbError):
    """Invalid or missing configuration."""


class MbTransportError(MbError):
    """HTTP-level failure (connection error, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MbMalformedResponseError(MbError):
    """Response body was empty, not JSON, or not shaped as expected."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class MbEmptyCatalogError(MbError):
    """The resource list was fetched but contained no usable resource names."""


class MbApiError(MbError):
    """API answered with an HTTP status this client cannot use."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MbAuthenticationError(MbApiError):
    """Token rejected (HTTP 400/401) or token refresh failed."""


class MbNoCredentialsError(MbAuthenticationError):
    """An authorized request was attempted without an access token.

    Raised (or recorded) before any network traffic happens.  Call
    :meth:`pymbapi.client.MercedesClient.login` first.
    """


class MbRateLimitError(MbApiError):
    """Too many requests (HTTP 429).

    No automatic back-off is performed; the caller decides when to retry.
    """


class MbServiceUnavailableError(MbApiError):
    """Provider reported HTTP 500 or 503."""


class MbEndpointNotSupportedError(MbApiError):
    """Operation not offered by the Mercedes-Benz BYOCAR API."""
