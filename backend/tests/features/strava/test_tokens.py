"""
Tests for TokenManager.
"""

import asyncio

import httpx
import pytest

from trailwatch.features.strava import StravaOAuth, TokenData, TokenManager, TokenResponse
from trailwatch.shared.errors import AuthError, StorageError, UserMismatch
from trailwatch.shared.http import RetryingHttpClient


# =============================================================================
# Fakes
# =============================================================================

NOW = 1_700_000_000

EXPIRED = TokenData(access_token="old-access", refresh_token="old-refresh", expires_at=NOW - 60)
VALID = TokenData(access_token="access", refresh_token="refresh", expires_at=NOW + 3600)


class FakeOAuth:
    def __init__(self, athlete_id=None, error=None):
        self.athlete_id = athlete_id
        self.error = error
        self.refreshed_with = []
        self.exchanged = []

    async def refresh_token(self, refresh_token):
        self.refreshed_with.append(refresh_token)
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        return TokenResponse(
            access_token="new-access",
            refresh_token="new-refresh",
            expires_at=NOW + 21600,
        )

    async def exchange_code(self, code):
        self.exchanged.append(code)
        if self.error:
            raise self.error
        payload = {
            "access_token": "code-access",
            "refresh_token": "code-refresh",
            "expires_at": NOW + 21600,
        }
        if self.athlete_id is not None:
            payload["athlete"] = {"id": self.athlete_id}
        return TokenResponse.model_validate(payload)

    def get_authorization_url(self, redirect_uri):
        return f"https://auth?redirect_uri={redirect_uri}"


class FakeTokenStore:
    def __init__(self, token=None, fail_writes=False):
        self.token = token
        self.fail_writes = fail_writes
        self.reads = 0
        self.writes = []

    async def get_token(self):
        self.reads += 1
        if self.token is None:
            raise AuthError("No strava auth data found in db")
        return self.token

    async def set_token(self, token):
        if self.fail_writes:
            raise StorageError("db down")
        self.writes.append(token)
        self.token = token


def manager(oauth, store, expected_user_id="42"):
    return TokenManager(oauth, store, expected_user_id=expected_user_id, clock=lambda: NOW)


# =============================================================================
# get_token
# =============================================================================

class TestGetToken:
    """Tests for TokenManager.get_token."""

    @pytest.mark.asyncio
    async def test_valid_token_loaded_once(self):
        oauth, store = FakeOAuth(), FakeTokenStore(VALID)
        tokens = manager(oauth, store)

        assert await tokens.get_token() == VALID
        assert await tokens.get_token() == VALID
        assert store.reads == 1
        assert oauth.refreshed_with == []

    @pytest.mark.asyncio
    async def test_expired_token_refreshed_once(self):
        oauth, store = FakeOAuth(), FakeTokenStore(EXPIRED)
        tokens = manager(oauth, store)

        token = await tokens.get_token()
        again = await tokens.get_token()

        assert oauth.refreshed_with == ["old-refresh"]
        assert token.access_token == "new-access"
        assert token.expires_at > NOW
        assert again == token
        assert store.writes == [token]

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self):
        oauth, store = FakeOAuth(), FakeTokenStore(EXPIRED)
        tokens = manager(oauth, store)

        results = await asyncio.gather(*[tokens.get_token() for _ in range(5)])

        assert len(oauth.refreshed_with) == 1
        assert {t.access_token for t in results} == {"new-access"}

    @pytest.mark.asyncio
    async def test_missing_token(self):
        tokens = manager(FakeOAuth(), FakeTokenStore(None))

        with pytest.raises(AuthError):
            await tokens.get_token()

    @pytest.mark.asyncio
    async def test_refresh_failure(self):
        oauth = FakeOAuth(error=AuthError("Token refresh failed: 401"))
        tokens = manager(oauth, FakeTokenStore(EXPIRED))

        with pytest.raises(AuthError):
            await tokens.get_token()

    @pytest.mark.asyncio
    async def test_persist_failure_keeps_new_token(self):
        oauth, store = FakeOAuth(), FakeTokenStore(EXPIRED, fail_writes=True)
        tokens = manager(oauth, store)

        token = await tokens.get_token()

        assert token.access_token == "new-access"
        assert (await tokens.get_token()) == token
        assert len(oauth.refreshed_with) == 1

    @pytest.mark.asyncio
    async def test_refresh_survives_rate_limit(self):
        requests, sleeps = [], []
        responses = [
            httpx.Response(429),
            httpx.Response(200, json={
                "access_token": "new-access",
                "refresh_token": "new-refresh",
                "expires_at": NOW + 21600,
            }),
        ]

        def handler(request):
            requests.append(request)
            return responses.pop(0)

        async def fake_sleep(delay):
            sleeps.append(delay)

        http = RetryingHttpClient(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            sleep=fake_sleep,
        )
        oauth = StravaOAuth("123", "shh", http)
        tokens = manager(oauth, FakeTokenStore(EXPIRED))

        token = await tokens.get_token()

        assert token.access_token == "new-access"
        assert len(requests) == 2
        assert sleeps == [1.0]


# =============================================================================
# exchange_code
# =============================================================================

class TestExchangeCode:
    """Tests for TokenManager.exchange_code."""

    @pytest.mark.asyncio
    async def test_matching_athlete_stored(self):
        oauth, store = FakeOAuth(athlete_id=42), FakeTokenStore()
        tokens = manager(oauth, store)

        token = await tokens.exchange_code("abc")

        assert oauth.exchanged == ["abc"]
        assert store.writes == [token]
        assert await tokens.get_token() == token

    @pytest.mark.asyncio
    async def test_other_athlete_rejected(self):
        oauth, store = FakeOAuth(athlete_id=7), FakeTokenStore()
        tokens = manager(oauth, store)

        with pytest.raises(UserMismatch) as exc_info:
            await tokens.exchange_code("abc")

        assert exc_info.value.athlete_id == "7"
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_no_configured_user_rejected(self):
        oauth, store = FakeOAuth(athlete_id=42), FakeTokenStore()
        tokens = manager(oauth, store, expected_user_id=None)

        with pytest.raises(UserMismatch):
            await tokens.exchange_code("abc")
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_user_mismatch_is_auth_error(self):
        tokens = manager(FakeOAuth(athlete_id=7), FakeTokenStore())

        with pytest.raises(AuthError):
            await tokens.exchange_code("abc")

    def test_authorization_url(self):
        tokens = manager(FakeOAuth(), FakeTokenStore())
        assert tokens.authorization_url("https://cb") == "https://auth?redirect_uri=https://cb"
