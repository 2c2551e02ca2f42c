"""OAuth2 token models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pymbapi.models._base import MbBaseModel


class TokenState(BaseModel):
    """Access/refresh token pair held by an auth session.

    Either token may be empty.  A failed refresh always yields the
    fully empty state (see :meth:`cleared`).
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = ""
    refresh_token: str = ""

    @classmethod
    def cleared(cls) -> TokenState:
        return cls()

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token)


class TokenResponse(MbBaseModel):
    """Body returned by the token endpoint.

    Only the members the session reads are validated.  ``token_type``,
    ``expires_in``, ``scope`` and the rest stay available in ``raw``.
    """

    access_token: str = ""
    refresh_token: str = ""
    error: str | None = None
    error_description: Any = None

    @field_validator("access_token", "refresh_token", "error", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: object) -> object:
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value

    @property
    def has_error(self) -> bool:
        """Whether an ``error`` member was present (even if blank)."""
        return self.error is not None
