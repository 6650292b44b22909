"""
Base repository with common persistence operations.

Uses SQLAlchemy async session for non-blocking database access.
trailwatch tables hold a single row (id = 1) that is only ever
overwritten, so the main write primitive is upsert().

Usage:
    class TroyStatusRepository(BaseRepository[TroyStatusRow]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, TroyStatusRow)

        async def get_current(self) -> TroyStatusRow | None:
            return await self.get_by_id(SINGLETON_ID)
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

SINGLETON_ID = 1


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    All methods are async for use with AsyncSession. Repositories never
    commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: Async database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    async def get_by_id(self, id: int) -> T | None:
        """
        Get entity by primary key ID.

        Returns:
            Entity if found, None otherwise
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> T:
        """Create new entity."""
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity: T, **kwargs) -> T:
        """Update entity fields."""
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        return entity

    async def upsert(self, id: int, **kwargs) -> T:
        """
        Overwrite the given fields of row `id`, creating it if missing.

        Fields not passed keep their stored values (or column defaults
        when the row is new).
        """
        entity = await self.get_by_id(id)
        if entity is None:
            return await self.create(id=id, **kwargs)
        return await self.update(entity, **kwargs)
