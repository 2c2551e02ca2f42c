"""Vehicle status, capability and snapshot models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pymbapi.models.custom_data import CustomDataRecord


class VehicleData(BaseModel):
    """Lock state and odometer, merged from the vehicle containers."""

    model_config = ConfigDict(frozen=True)

    odo: float | None = None
    """Odometer reading in the vehicle's distance unit."""
    car_open: bool | None = None
    """``True`` unless the doors report a locked state; ``None`` if unknown."""
    car_open_message: str = ""


class Capabilities(BaseModel):
    """What this provider can report or control."""

    model_config = ConfigDict(frozen=True)

    has_battery_level: bool = False
    has_charge_command: bool = False
    has_climate_command: bool = False
    has_defrost_command: bool = False
    has_inside_temp: bool = False
    has_outside_temp: bool = False
    has_odo: bool = True
    has_lock_status: bool = True
    has_charge_limit: bool = False
    has_custom_data: bool = True
    sleep_interval: int = 0
    """Minutes the vehicle may sleep between polls; 0 means no sleep state."""


class CarDataSnapshot(BaseModel):
    """Everything gathered in one polling cycle."""

    model_config = ConfigDict(frozen=True)

    vehicle: VehicleData | None = None
    custom_data: list[CustomDataRecord] = Field(default_factory=list)
