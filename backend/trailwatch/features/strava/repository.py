"""
Strava credential persistence.

Data access layer for the encrypted strava_auth row.
"""

import logging
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trailwatch.shared.encryption import DecryptionError, decrypt, encrypt
from trailwatch.shared.errors import AuthError, StorageError
from trailwatch.shared.repository import BaseRepository, SINGLETON_ID
from .models import StravaAuthRow, TokenData

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """Durable, encrypted-at-rest storage for the OAuth credential."""

    async def get_token(self) -> TokenData: ...

    async def set_token(self, token: TokenData) -> None: ...


class StravaAuthRepository(BaseRepository[StravaAuthRow]):
    """Repository for the single strava_auth row."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, StravaAuthRow)

    async def get_current(self) -> StravaAuthRow | None:
        return await self.get_by_id(SINGLETON_ID)

    async def save_tokens(
        self,
        access_token: bytes,
        refresh_token: bytes,
        expires_at: int
    ) -> StravaAuthRow:
        """
        Overwrite the stored credential.

        Args:
            access_token: Encrypted access token
            refresh_token: Encrypted refresh token
            expires_at: Token expiration timestamp
        """
        return await self.upsert(
            SINGLETON_ID,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )


class StravaAuthStore:
    """
    TokenStore backed by the database, encrypting tokens with Fernet.

    Usage:
        store = StravaAuthStore(AsyncSessionLocal, settings.db_encryption_key)
        token = await store.get_token()
    """

    def __init__(self, session_factory: Callable[[], AsyncSession], encryption_key: str):
        self._session_factory = session_factory
        self._encryption_key = encryption_key

    async def get_token(self) -> TokenData:
        """
        Load and decrypt the stored credential.

        Raises:
            AuthError: If no credential is stored or it cannot be decrypted
        """
        try:
            async with self._session_factory() as db:
                row = await StravaAuthRepository(db).get_current()
        except SQLAlchemyError as e:
            raise AuthError(f"Failed to read strava auth from db: {e}") from e

        if row is None:
            raise AuthError("No strava auth data found in db, please authenticate")

        try:
            return TokenData(
                access_token=decrypt(row.access_token, self._encryption_key),
                refresh_token=decrypt(row.refresh_token, self._encryption_key),
                expires_at=int(row.expires_at),
            )
        except DecryptionError as e:
            raise AuthError("Stored strava auth could not be decrypted") from e

    async def set_token(self, token: TokenData) -> None:
        """
        Encrypt and overwrite the stored credential.

        Raises:
            StorageError: If the write fails
        """
        logger.debug("Updating strava auth in the DB")
        try:
            async with self._session_factory() as db:
                await StravaAuthRepository(db).save_tokens(
                    access_token=encrypt(token.access_token, self._encryption_key),
                    refresh_token=encrypt(token.refresh_token, self._encryption_key),
                    expires_at=token.expires_at,
                )
                await db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write strava auth to db: {e}") from e
