"""Request dispatch outcome models."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from pymbapi.exceptions import MbError


class DispatchOutcome(enum.Enum):
    """Classification of a dispatched request, derived from the HTTP status."""

    SUCCESS = "success"
    NO_CONTENT = "no_content"
    REAUTH_REQUIRED = "reauth_required"
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Result of :meth:`pymbapi.dispatcher.RequestDispatcher.dispatch`.

    ``body`` holds the decoded JSON for ``SUCCESS`` and is ``None``
    otherwise.  ``status_code`` is ``None`` when no response was
    received.  Failed outcomes carry the classified ``error``.
    """

    outcome: DispatchOutcome
    body: Any = None
    status_code: int | None = None
    error: MbError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome in (DispatchOutcome.SUCCESS, DispatchOutcome.NO_CONTENT)

    def raise_for_outcome(self) -> None:
        """Raise the recorded error if the request did not succeed."""
        if self.ok:
            return
        if self.error is not None:
            raise self.error
        raise MbError(f"Request failed ({self.outcome.value})")
