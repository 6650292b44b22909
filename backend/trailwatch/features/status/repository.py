"""
Trail status persistence.

TroyStatusRepository works inside a caller-owned session.
TroyStatusStore opens one short session per operation so it can be
shared by the long-running poller and request handlers.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trailwatch.shared.errors import StorageError
from trailwatch.shared.repository import BaseRepository, SINGLETON_ID
from .models import TroyStatus, TroyStatusRow

logger = logging.getLogger(__name__)


class StatusStore(Protocol):
    """Durable storage for the on-trail flag and beacon URL."""

    async def get_status(self) -> TroyStatus: ...

    async def set_on_trail(self, is_on_trail: bool) -> None: ...

    async def set_beacon_url(self, beacon_url: Optional[str]) -> None: ...


class TroyStatusRepository(BaseRepository[TroyStatusRow]):
    """Repository for the single troy_status row."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TroyStatusRow)

    async def get_current(self) -> TroyStatusRow | None:
        return await self.get_by_id(SINGLETON_ID)

    async def set_on_trail(self, is_on_trail: bool, updated_at: datetime) -> TroyStatusRow:
        return await self.upsert(
            SINGLETON_ID,
            is_on_trail=is_on_trail,
            trail_status_updated=updated_at,
        )

    async def set_beacon_url(self, beacon_url: Optional[str]) -> TroyStatusRow:
        return await self.upsert(SINGLETON_ID, beacon_url=beacon_url)


class TroyStatusStore:
    """
    StatusStore backed by the database.

    Writes are last-write-wins single-row upserts.

    Usage:
        store = TroyStatusStore(AsyncSessionLocal)
        status = await store.get_status()
        await store.set_beacon_url(None)
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._session_factory = session_factory
        self._clock = clock

    async def get_status(self) -> TroyStatus:
        """
        Read the current status.

        A missing or unreadable row is reported as "off trail, no beacon".
        """
        try:
            async with self._session_factory() as db:
                row = await TroyStatusRepository(db).get_current()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get troy status from db: {e}")
            return TroyStatus()

        if row is None:
            return TroyStatus()
        return TroyStatus.from_row(row)

    async def set_on_trail(self, is_on_trail: bool) -> None:
        logger.debug(f"Updating troy status in the DB to {is_on_trail}")
        try:
            async with self._session_factory() as db:
                await TroyStatusRepository(db).set_on_trail(is_on_trail, self._clock())
                await db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to set troy status in db: {e}") from e

    async def set_beacon_url(self, beacon_url: Optional[str]) -> None:
        logger.debug(f"Updating beacon url in the DB to {beacon_url!r}")
        try:
            async with self._session_factory() as db:
                await TroyStatusRepository(db).set_beacon_url(beacon_url)
                await db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to set beacon url in db: {e}") from e
