"""
Shared test fixtures.

In-memory fakes for the status store and notifier, plus a throwaway
SQLite database for the persistence tests.
"""

from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trailwatch.db.session import create_engine_for, init_db
from trailwatch.features.status import TroyStatus


# =============================================================================
# Fakes
# =============================================================================

class FakeStatusStore:
    """StatusStore recording every write into a shared call log."""

    def __init__(self, status: TroyStatus, calls: list):
        self.status = status
        self.calls = calls

    async def get_status(self) -> TroyStatus:
        return self.status

    async def set_on_trail(self, is_on_trail: bool) -> None:
        self.calls.append(("set_on_trail", is_on_trail))
        self.status = TroyStatus(is_on_trail=is_on_trail, beacon_url=self.status.beacon_url)

    async def set_beacon_url(self, beacon_url: Optional[str]) -> None:
        self.calls.append(("set_beacon_url", beacon_url))
        self.status = TroyStatus(is_on_trail=self.status.is_on_trail, beacon_url=beacon_url)


class RecordingNotifier:
    """Notifier recording every call into a shared call log."""

    def __init__(self, calls: list):
        self.calls = calls

    async def notify_start(self, beacon_url: str) -> None:
        self.calls.append(("notify_start", beacon_url))

    async def notify_end(self, activity_id: Optional[int]) -> None:
        self.calls.append(("notify_end", activity_id))

    async def notify_discard(self) -> None:
        self.calls.append(("notify_discard",))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def calls() -> list:
    """Ordered log shared by the fakes."""
    return []


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory over a fresh SQLite file with all tables."""
    engine = create_engine_for(f"sqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def make_status_store(calls):
    """Build a FakeStatusStore starting from the given status."""
    def _make(status: TroyStatus) -> FakeStatusStore:
        return FakeStatusStore(status, calls)
    return _make


@pytest.fixture
def notifier(calls) -> RecordingNotifier:
    return RecordingNotifier(calls)
