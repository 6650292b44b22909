"""
Service graph.

Every stateful service (token cache, response caches, HTTP pool) is
built once per process here and shared by the poller and the request
handlers through app.state.
"""

from dataclasses import dataclass
from typing import Callable

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from trailwatch.config import Settings
from trailwatch.features.beacon import (
    BeaconClient,
    BeaconPoller,
    TrailNotificationService,
)
from trailwatch.features.status import TroyStatusStore
from trailwatch.features.strava import (
    StravaAuthStore,
    StravaClient,
    StravaOAuth,
    TokenManager,
)
from trailwatch.shared.discord import DiscordWebhook
from trailwatch.shared.http import RetryingHttpClient, RetryPolicy


@dataclass
class Services:
    http: httpx.AsyncClient
    status_store: TroyStatusStore
    tokens: TokenManager
    strava: StravaClient
    notifier: TrailNotificationService
    poller: BeaconPoller

    async def aclose(self) -> None:
        await self.poller.stop()
        await self.http.aclose()


def build_services(
    settings: Settings,
    session_factory: Callable[[], AsyncSession],
    http: httpx.AsyncClient | None = None,
) -> Services:
    """Wire the services from settings."""
    if http is None:
        http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    strava_http = RetryingHttpClient(
        http,
        RetryPolicy(
            max_retries=settings.strava_max_retries,
            initial_backoff=settings.strava_initial_backoff_seconds,
        ),
    )

    status_store = TroyStatusStore(session_factory)
    tokens = TokenManager(
        oauth=StravaOAuth(settings.strava_client_id, settings.strava_client_secret, strava_http),
        store=StravaAuthStore(session_factory, settings.db_encryption_key),
        expected_user_id=settings.strava_user_id,
    )
    strava = StravaClient(
        tokens=tokens,
        http=strava_http,
        user_id=settings.strava_user_id,
        cache_ttl=settings.strava_cache_ttl_seconds,
    )
    notifier = TrailNotificationService(
        webhook=DiscordWebhook(settings.discord_webhook_url, http, settings.host_uri),
        strava=strava,
    )
    poller = BeaconPoller(
        status_store=status_store,
        beacon=BeaconClient(http),
        notifier=notifier,
        interval=settings.beacon_poll_interval_seconds,
    )

    return Services(
        http=http,
        status_store=status_store,
        tokens=tokens,
        strava=strava,
        notifier=notifier,
        poller=poller,
    )
