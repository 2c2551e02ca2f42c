"""Resource discovery and per-resource value extraction.

The BYOCAR API publishes a per-vehicle list of resources at
``/vehicledata/v1/vehicles/{vin}/resources``; which resources appear
depends on the vehicle and the products the account subscribed to.
:class:`ResourceCatalog` keeps the discovered names and fetches each one
into a :class:`~pymbapi.models.custom_data.CustomDataRecord`.

Reprocessing is gated on a fingerprint: the number of entries in the
list.  Two lists of equal length are treated as unchanged even when the
names differ.  Discovery runs on every poll, so a cheap check matters
more here than detecting a renamed resource.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from pymbapi._api._common import iter_until_empty, resources_url
from pymbapi.config import MercedesConfig
from pymbapi.dispatcher import RequestDispatcher
from pymbapi.exceptions import MbEmptyCatalogError, MbError, MbMalformedResponseError
from pymbapi.models.catalog import CatalogState, ResourceDescriptor
from pymbapi.models.custom_data import CustomDataRecord
from pymbapi.models.dispatch import DispatchResult

_logger = logging.getLogger(__name__)


def fingerprint_of(body: Any) -> int:
    """Number of top-level entries in *body* (0 for ``None`` and scalars)."""
    if isinstance(body, (list, dict)):
        return len(body)
    return 0


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class ResourceCatalog:
    """Resource names available for one vehicle, plus their values."""

    def __init__(self, dispatcher: RequestDispatcher, config: MercedesConfig) -> None:
        self._dispatcher = dispatcher
        self._config = config
        self._state = CatalogState()
        self._last_error: MbError | None = None

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def fields(self) -> tuple[str, ...]:
        return self._state.fields

    @property
    def fingerprint(self) -> int | None:
        return self._state.fingerprint

    @property
    def last_error(self) -> MbError | None:
        """Why the most recent discovery failed, if it did."""
        return self._last_error

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def _fetch_resource_list(self) -> DispatchResult:
        url = resources_url(self._config.base_url, self._config.vin)
        return await self._dispatcher.dispatch("GET", url, timeout=self._config.discovery_timeout)

    async def discover(self) -> bool:
        """Fetch the resource list once and process it."""
        result = await self._fetch_resource_list()
        if not result.ok:
            self._last_error = result.error
            return False
        return self.process(result.body)

    async def discover_with_retries(self, attempts: int | None = None) -> bool:
        """Fetch the resource list, retrying failed requests.

        Up to *attempts* requests are made (``config.discovery_attempts``
        by default).  There is no delay between attempts.
        """
        max_attempts = attempts if attempts is not None else self._config.discovery_attempts
        result: DispatchResult | None = None
        for attempt in range(1, max_attempts + 1):
            result = await self._fetch_resource_list()
            if result.ok:
                break
            _logger.debug("Resource list attempt %d/%d failed (%s)", attempt, max_attempts, result.outcome.value)
        if result is None or not result.ok:
            _logger.error("Failed to get available resources after %d attempts", max_attempts)
            self._last_error = result.error if result is not None else None
            return False

        if not self.process(result.body):
            _logger.error("Unable to process list of available resources")
            return False
        return True

    def process(self, body: Any) -> bool:
        """Update the catalog from a decoded resource list.

        Returns ``True`` when the fingerprint is unchanged (names are
        kept as they are) or when at least one resource name was found.
        The new fingerprint is stored before the names are collected, so
        a list that yields no names is not re-walked until its size
        changes.
        """
        self._last_error = None
        fingerprint = fingerprint_of(body)
        if fingerprint == self._state.fingerprint:
            _logger.debug("Resource list fingerprint unchanged (%d), skipping processing", fingerprint)
            return True
        _logger.debug("Resource list fingerprint changed (%d), start processing", fingerprint)
        self._state = self._state.model_copy(update={"fingerprint": fingerprint})

        try:
            fields = self._collect_fields([] if body is None else body)
        except (MbError, ValidationError) as exc:
            _logger.error("Failed during processing of resources: %s", exc)
            self._last_error = exc if isinstance(exc, MbError) else MbMalformedResponseError(str(exc))
            return False

        if not fields:
            _logger.debug("Found %d resource entries but none with a name", fingerprint)
            self._last_error = MbEmptyCatalogError(f"No named resources among {fingerprint} entries")
            return False

        self._state = CatalogState(fingerprint=fingerprint, fields=fields)
        _logger.info("Found resource fields: %s", self._state.field_list)
        return True

    def _collect_fields(self, entries: Any) -> tuple[str, ...]:
        if not isinstance(entries, list):
            raise MbMalformedResponseError(f"Resource list is not an array: {type(entries).__name__}")

        expected_version = self._config.expected_resource_version
        names: list[str] = []
        for _index, entry in iter_until_empty(entries):
            if entry is None:
                continue
            if not isinstance(entry, dict):
                raise MbMalformedResponseError(f"Resource entry is not an object: {entry!r}")
            descriptor = ResourceDescriptor.model_validate(entry)
            if descriptor.name:
                names.append(descriptor.name)
            if descriptor.version is not None and descriptor.version != expected_version:
                _logger.info(
                    "Found resource with version %s instead of expected %s; continuing but results may be wrong",
                    descriptor.version,
                    expected_version,
                )
        return tuple(names)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def extract_all(self) -> list[CustomDataRecord]:
        """Fetch every known resource; skip the ones that fail."""
        records: list[CustomDataRecord] = []
        for index, field in enumerate(self._state.fields):
            record = await self._extract_one(index, field)
            if record is not None:
                records.append(record)
        return records

    async def _extract_one(self, index: int, field: str) -> CustomDataRecord | None:
        url = resources_url(self._config.base_url, self._config.vin, field)
        result = await self._dispatcher.dispatch("GET", url, timeout=self._config.resource_timeout)
        if not result.ok:
            _logger.debug("Failed to retrieve data for resource %s", field)
            return None

        body = result.body
        if not body:
            _logger.debug("Got empty data for resource %s", field)
            return None

        member = body.get(field) if isinstance(body, dict) else None
        if not isinstance(member, dict) or "value" not in member:
            _logger.debug("Resource %s has no value", field)
            return None

        value = _as_string(member["value"])
        _logger.debug("Got data for resource (%d) %s: %s", index, field, value)
        return CustomDataRecord(index=index, label=field, value=value)
