"""OAuth2 session state and the refresh-token exchange."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from pydantic import ValidationError

from pymbapi._constants import AUTH_BASE_URL, TOKEN_PATH
from pymbapi._redact import mask_token
from pymbapi.models.credentials import Credentials
from pymbapi.models.token import TokenResponse, TokenState

if TYPE_CHECKING:
    from pymbapi.dispatcher import RequestDispatcher

_logger = logging.getLogger(__name__)

TokenCallback = Callable[[TokenState], None]


class AuthSession:
    """Owns the token pair for one vehicle account.

    Only refresh-token authentication is supported: the session starts
    from the refresh token in :class:`Credentials` and exchanges it for
    an access token.  The provider rotates the refresh token on every
    exchange, so ``on_token_refresh`` is called with the new
    :class:`TokenState` each time; persist ``refresh_token`` from it
    for the next process start.

    While an exchange is running :attr:`is_authenticating` is ``True``.
    The dispatcher checks it so a 400/401 from the token endpoint does
    not start another refresh.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        auth_base_url: str = AUTH_BASE_URL,
        on_token_refresh: TokenCallback | None = None,
    ) -> None:
        self._credentials = credentials
        self._token_url = f"{auth_base_url}{TOKEN_PATH}"
        self._tokens = TokenState(refresh_token=credentials.refresh_token)
        self._authenticating = False
        self._on_token_refresh = on_token_refresh

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def tokens(self) -> TokenState:
        return self._tokens

    @property
    def is_authenticating(self) -> bool:
        return self._authenticating

    def invalidate(self) -> None:
        """Drop both tokens; only a new session can authenticate again."""
        self._tokens = TokenState.cleared()

    async def login(self, dispatcher: RequestDispatcher) -> bool:
        """Authenticate using the stored refresh token."""
        _logger.info("Attempting login (using refresh token)")
        return await self.refresh(dispatcher)

    async def refresh(self, dispatcher: RequestDispatcher) -> bool:
        """Exchange the refresh token for a new token pair.

        Returns ``True`` when both tokens were replaced.  On any failure
        both tokens are cleared and ``False`` is returned.  No request is
        made when there is no refresh token.
        """
        _logger.info("Refreshing login credentials")
        self._authenticating = True
        try:
            new_tokens = await self._exchange(dispatcher)
        finally:
            self._authenticating = False

        if new_tokens is None:
            _logger.error("Failed to refresh login credentials")
            self.invalidate()
            return False

        self._tokens = new_tokens
        _logger.info("Refresh successful, received new refresh token %s", mask_token(new_tokens.refresh_token))
        if self._on_token_refresh is not None:
            try:
                self._on_token_refresh(new_tokens)
            except Exception:
                _logger.warning("on_token_refresh callback failed", exc_info=True)
        return True

    async def _exchange(self, dispatcher: RequestDispatcher) -> TokenState | None:
        refresh_token = self._tokens.refresh_token
        if not refresh_token:
            _logger.error("No refresh token to perform refresh")
            return None

        body = urlencode({"grant_type": "refresh_token", "refresh_token": refresh_token})
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": f"Basic {self._credentials.basic_auth}",
        }
        result = await dispatcher.dispatch("POST", self._token_url, body, headers, requires_auth=False)
        if not result.ok or result.body is None:
            _logger.error("Failed to get token (%s)", result.outcome.value)
            return None

        if not isinstance(result.body, dict):
            _logger.error("Unexpected token response type: %s", type(result.body).__name__)
            return None
        try:
            response = TokenResponse.model_validate(result.body)
        except ValidationError as exc:
            _logger.error("Malformed token response: %s", exc.error_count())
            return None

        if response.has_error:
            _logger.error("Received error response (%s) %s", response.error, response.error_description or "")
            return None
        if not response.access_token:
            _logger.error("Received access token is zero length")
            return None
        if not response.refresh_token:
            _logger.error("Received refresh token is zero length")
            return None

        _logger.debug("Received access token from API")
        return TokenState(access_token=response.access_token, refresh_token=response.refresh_token)
