"""Data models for Mercedes-Benz vehicle data API responses."""

from pymbapi.models._base import MbBaseModel
from pymbapi.models.catalog import CatalogState, ResourceDescriptor
from pymbapi.models.credentials import Credentials
from pymbapi.models.custom_data import CustomDataRecord
from pymbapi.models.dispatch import DispatchOutcome, DispatchResult
from pymbapi.models.token import TokenResponse, TokenState
from pymbapi.models.vehicle import Capabilities, CarDataSnapshot, VehicleData

__all__ = [
    "Capabilities",
    "CarDataSnapshot",
    "CatalogState",
    "Credentials",
    "CustomDataRecord",
    "DispatchOutcome",
    "DispatchResult",
    "MbBaseModel",
    "ResourceDescriptor",
    "TokenResponse",
    "TokenState",
    "VehicleData",
]
