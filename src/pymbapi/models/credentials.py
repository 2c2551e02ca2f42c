"""Account credentials model."""

from __future__ import annotations

import base64

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    """Immutable credentials supplied when a session is created.

    Parameters
    ----------
    account : str
        Account identifier.  Its base64 form is the HTTP Basic
        credential for the token endpoint.
    refresh_token : str
        Refresh token the session starts from.  Later rotations live in
        :class:`~pymbapi.models.token.TokenState`, never here.
    vin : str
        Vehicle identification number.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    account: str
    refresh_token: str = ""
    vin: str

    @property
    def basic_auth(self) -> str:
        """Base64-encoded account identifier for the ``Authorization: Basic`` header."""
        return base64.b64encode(self.account.encode("utf-8")).decode("ascii")
