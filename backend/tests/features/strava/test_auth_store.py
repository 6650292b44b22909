"""
Tests for StravaAuthStore against a real SQLite database.
"""

import pytest
from sqlalchemy import select

from trailwatch.features.strava import StravaAuthRow, StravaAuthStore, TokenData
from trailwatch.shared.errors import AuthError


TOKEN = TokenData(access_token="access", refresh_token="refresh", expires_at=1_700_000_000)


class TestStravaAuthStore:
    """Encrypted single-row token storage."""

    @pytest.mark.asyncio
    async def test_empty_store(self, session_factory):
        store = StravaAuthStore(session_factory, "key")

        with pytest.raises(AuthError):
            await store.get_token()

    @pytest.mark.asyncio
    async def test_roundtrip(self, session_factory):
        store = StravaAuthStore(session_factory, "key")

        await store.set_token(TOKEN)

        assert await store.get_token() == TOKEN

    @pytest.mark.asyncio
    async def test_tokens_encrypted_at_rest(self, session_factory):
        await StravaAuthStore(session_factory, "key").set_token(TOKEN)

        async with session_factory() as db:
            row = (await db.execute(select(StravaAuthRow))).scalar_one()

        assert row.id == 1
        assert b"access" not in row.access_token
        assert b"refresh" not in row.refresh_token
        assert row.expires_at == TOKEN.expires_at

    @pytest.mark.asyncio
    async def test_overwrite_keeps_single_row(self, session_factory):
        store = StravaAuthStore(session_factory, "key")
        newer = TokenData(access_token="a2", refresh_token="r2", expires_at=1_700_021_600)

        await store.set_token(TOKEN)
        await store.set_token(newer)

        assert await store.get_token() == newer
        async with session_factory() as db:
            rows = (await db.execute(select(StravaAuthRow))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_wrong_key(self, session_factory):
        await StravaAuthStore(session_factory, "key").set_token(TOKEN)

        with pytest.raises(AuthError):
            await StravaAuthStore(session_factory, "other-key").get_token()

    def test_repr_hides_secrets(self):
        assert repr(TOKEN) == "TokenData(expires_at=1700000000)"
