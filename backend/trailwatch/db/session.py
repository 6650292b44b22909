"""
Database Session Management

Provides the async engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from trailwatch.config import settings


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async version."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def create_engine_for(url: str) -> AsyncEngine:
    """Create an async engine with per-dialect settings."""
    async_url = _get_async_url(url)

    if async_url.startswith("sqlite"):
        return create_async_engine(
            async_url,
            connect_args={"check_same_thread": False}
        )
    elif async_url.startswith("postgresql"):
        # PostgreSQL with connection pool settings
        return create_async_engine(
            async_url,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,  # 30 minutes
        )
    return create_async_engine(async_url)


async_engine = create_engine_for(settings.database_url)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


# =============================================================================
# Initialization
# =============================================================================

async def init_db(engine: AsyncEngine = async_engine) -> None:
    """Create database tables."""
    from trailwatch.models import Base, register_models

    register_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
