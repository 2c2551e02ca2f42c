"""Shared helpers for the vehicle data endpoint modules.

It is internal to pymbapi and may change at any time.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from pymbapi._constants import VEHICLES_PATH


def vehicle_url(base_url: str, vin: str, *parts: str) -> str:
    """Build ``{base_url}/vehicledata/v1/vehicles/{vin}[/{part}...]``."""
    path = "/".join((VEHICLES_PATH.rstrip("/"), vin, *parts))
    return f"{base_url}{path}"


def resources_url(base_url: str, vin: str, resource: str | None = None) -> str:
    if resource is None:
        return vehicle_url(base_url, vin, "resources")
    return vehicle_url(base_url, vin, "resources", resource)


def container_url(base_url: str, vin: str, container: str) -> str:
    return vehicle_url(base_url, vin, "containers", container)


def is_empty_element(value: Any) -> bool:
    """Return ``True`` for ``None`` and empty lists and dicts.

    Scalars, including ``""`` and ``0``, are never empty.
    """
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return not value
    return False


def iter_until_empty(items: Sequence[Any]) -> Iterator[tuple[int, Any]]:
    """Yield ``(index, entry)`` pairs, stopping at the first empty entry.

    The provider's arrays are read until the first empty entry:
    entry 0 is always yielded (callers skip it when it is ``None``), and
    iteration ends at the first later entry that is empty (or at the end
    of the list).
    """
    for index, entry in enumerate(items):
        if index > 0 and is_empty_element(entry):
            return
        yield index, entry
