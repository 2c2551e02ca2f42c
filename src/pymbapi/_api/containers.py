"""Vehicle containers: /vehicledata/v1/vehicles/{vin}/containers/{type}.

Only ``vehiclelockstatus`` and ``payasyoudrive`` are read.  Each answers
with a list of single-member objects such as
``[{"doorlockstatusvehicle": {"value": "2", "timestamp": 1595000000}}]``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pymbapi._api._common import container_url, is_empty_element, iter_until_empty
from pymbapi._constants import (
    CONTAINER_PAY_AS_YOU_DRIVE,
    CONTAINER_VEHICLE_LOCK_STATUS,
    LOCKED_DOOR_STATES,
)
from pymbapi.config import MercedesConfig
from pymbapi.dispatcher import RequestDispatcher
from pymbapi.exceptions import MbMalformedResponseError
from pymbapi.models.dispatch import DispatchOutcome, DispatchResult
from pymbapi.models.vehicle import VehicleData

_logger = logging.getLogger(__name__)

VEHICLE_CONTAINERS: tuple[str, ...] = (CONTAINER_VEHICLE_LOCK_STATUS, CONTAINER_PAY_AS_YOU_DRIVE)


def _value_of(member: Any) -> str | None:
    if not isinstance(member, dict):
        return None
    value = member.get("value")
    if is_empty_element(value):
        return None
    return str(value)


def parse_vehicle_container(entries: Sequence[Any], current: VehicleData | None = None) -> VehicleData:
    """Walk container entries and merge lock state and odometer into *current*.

    Raises
    ------
    MbMalformedResponseError
        If an entry is not a JSON object or the odometer is not numeric.
    """
    updates: dict[str, Any] = {}
    for _index, entry in iter_until_empty(entries):
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise MbMalformedResponseError(f"Container entry is not an object: {entry!r}")
        for member_name, member in entry.items():
            if member is None:
                continue
            _logger.debug("Found non empty field %s", member_name)

            if member_name == "doorlockstatusvehicle":
                value = _value_of(member)
                if value is not None:
                    _logger.debug("DoorLockStatusVehicle has value %s", value)
                    car_open = value not in LOCKED_DOOR_STATES
                    updates["car_open"] = car_open
                    updates["car_open_message"] = "Your Mercedes is open" if car_open else "Your Mercedes is locked"

            elif member_name == "odo":
                value = _value_of(member)
                if value is not None:
                    _logger.debug("Odo has value %s", value)
                    try:
                        updates["odo"] = float(value)
                    except ValueError as exc:
                        raise MbMalformedResponseError(f"Odometer value is not numeric: {value!r}") from exc

    base = current if current is not None else VehicleData()
    return base.model_copy(update=updates)


async def fetch_container(
    dispatcher: RequestDispatcher,
    config: MercedesConfig,
    container: str,
) -> DispatchResult:
    """GET one vehicle container."""
    url = container_url(config.base_url, config.vin, container)
    result = await dispatcher.dispatch("GET", url)
    if not result.ok:
        _logger.error("Failed to get data %s", container)
    return result


async def fetch_vehicle_data(dispatcher: RequestDispatcher, config: MercedesConfig) -> VehicleData | None:
    """Read lock state and odometer from the vehicle containers.

    A 204 counts as a valid answer without data.  Returns ``None`` when
    no container produced a valid answer.
    """
    data = VehicleData()
    got_data = False

    for container in VEHICLE_CONTAINERS:
        result = await fetch_container(dispatcher, config, container)
        if not result.ok:
            continue

        body = result.body
        if result.outcome is DispatchOutcome.NO_CONTENT or body in (None, [], {}):
            got_data = True
            continue
        if not isinstance(body, list):
            _logger.error("Unexpected reply from %s", container)
            continue

        try:
            data = parse_vehicle_container(body, data)
        except MbMalformedResponseError as exc:
            _logger.error("Unexpected reply from %s: %s", container, exc)
            continue
        got_data = True

    return data if got_data else None
