"""
OAuth token lifecycle.

TokenManager owns the in-memory copy of the single Strava credential.
It loads it lazily from the TokenStore, refreshes it when expired and
writes every new token back to the store.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from trailwatch.shared.errors import AuthError, StorageError, UserMismatch
from .models import TokenData
from .oauth import StravaOAuth
from .repository import TokenStore
from .schemas import TokenResponse

logger = logging.getLogger(__name__)


def _to_token_data(response: TokenResponse) -> TokenData:
    return TokenData(
        access_token=response.access_token,
        refresh_token=response.refresh_token,
        expires_at=response.expires_at,
    )


class TokenManager:
    """
    Cached, self-refreshing access to the Strava credential.

    All reads and writes of the cached token happen under one lock, so
    concurrent callers never trigger more than one refresh.

    Usage:
        tokens = TokenManager(oauth, StravaAuthStore(...), expected_user_id="123")
        token = await tokens.get_token()
    """

    def __init__(
        self,
        oauth: StravaOAuth,
        store: TokenStore,
        expected_user_id: Optional[str],
        clock: Callable[[], float] = time.time,
    ):
        self.oauth = oauth
        self.store = store
        self.expected_user_id = expected_user_id
        self._clock = clock
        self._token: Optional[TokenData] = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> TokenData:
        """
        Get a valid token, refreshing if needed.

        Raises:
            AuthError: If no token is stored or the refresh fails
        """
        async with self._lock:
            if self._token is None:
                self._token = await self.store.get_token()
                logger.debug("Loaded strava token from store")

            if not self._token.is_expired(self._clock()):
                return self._token

            logger.warning("Strava token has expired, refreshing")
            try:
                response = await self.oauth.refresh_token(self._token.refresh_token)
            except AuthError:
                logger.error("Failed to refresh strava token")
                raise

            token = _to_token_data(response)
            self._token = token
            await self._persist(token)
            return token

    async def exchange_code(self, code: str) -> TokenData:
        """
        Exchange an authorization code and adopt the resulting token.

        Raises:
            UserMismatch: If the authorized athlete is not the configured user
            AuthError: If the exchange fails
        """
        response = await self.oauth.exchange_code(code)

        if response.athlete is not None:
            athlete_id = str(response.athlete.id)
            if self.expected_user_id is None or athlete_id != self.expected_user_id:
                logger.warning(f"Rejected strava authorization for athlete {athlete_id}")
                raise UserMismatch(athlete_id, self.expected_user_id)

        token = _to_token_data(response)
        async with self._lock:
            self._token = token
            await self._persist(token)

        logger.info("Strava authorization stored")
        return token

    async def _persist(self, token: TokenData) -> None:
        # Strava has already revoked the previous refresh token at this point.
        try:
            await self.store.set_token(token)
        except StorageError as e:
            logger.error(f"Failed to persist strava token: {e}")

    def authorization_url(self, redirect_uri: str) -> str:
        return self.oauth.get_authorization_url(redirect_uri)
