"""pymbapi - Async Python client for the Mercedes-Benz vehicle data API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymbapi")
except PackageNotFoundError:
    __version__ = "0+local"
from pymbapi.catalog import ResourceCatalog
from pymbapi.client import MercedesClient
from pymbapi.config import MercedesConfig
from pymbapi.dispatcher import RequestDispatcher
from pymbapi.exceptions import (
    MbApiError,
    MbAuthenticationError,
    MbConfigError,
    MbEmptyCatalogError,
    MbEndpointNotSupportedError,
    MbError,
    MbMalformedResponseError,
    MbNoCredentialsError,
    MbRateLimitError,
    MbServiceUnavailableError,
    MbTransportError,
)
from pymbapi.models import (
    Capabilities,
    CarDataSnapshot,
    CatalogState,
    Credentials,
    CustomDataRecord,
    DispatchOutcome,
    DispatchResult,
    TokenState,
    VehicleData,
)
from pymbapi.session import AuthSession

__all__ = [
    "__version__",
    "AuthSession",
    "Capabilities",
    "CarDataSnapshot",
    "CatalogState",
    "Credentials",
    "CustomDataRecord",
    "DispatchOutcome",
    "DispatchResult",
    "MbApiError",
    "MbAuthenticationError",
    "MbConfigError",
    "MbEmptyCatalogError",
    "MbEndpointNotSupportedError",
    "MbError",
    "MbMalformedResponseError",
    "MbNoCredentialsError",
    "MbRateLimitError",
    "MbServiceUnavailableError",
    "MbTransportError",
    "MercedesClient",
    "MercedesConfig",
    "RequestDispatcher",
    "ResourceCatalog",
    "TokenState",
    "VehicleData",
]
