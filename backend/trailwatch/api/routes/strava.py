"""
Strava Routes

Endpoints for the single-athlete Strava integration:
- /strava/supersecretauthroute - Initiate OAuth flow
- /strava/callback - Handle OAuth callback
- /strava/data - Athlete stats and ride totals
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse, RedirectResponse

from trailwatch.api.deps import get_services
from trailwatch.config import settings
from trailwatch.features.strava import StravaData, summarize_rides
from trailwatch.services import Services
from trailwatch.shared.errors import (
    AuthError,
    DeserializationError,
    StravaAPIError,
    TransientNetworkError,
    UserMismatch,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_callback_url() -> str:
    return f"{settings.host_uri}/api/strava/callback"


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/supersecretauthroute")
async def strava_auth(services: Services = Depends(get_services)):
    """Redirect to the Strava consent screen."""
    if not settings.strava_client_id:
        raise HTTPException(status_code=503, detail="Strava integration not configured")

    return RedirectResponse(url=services.tokens.authorization_url(_get_callback_url()))


@router.get("/callback", response_class=PlainTextResponse)
async def strava_callback(
    code: Optional[str] = Query(None),
    scope: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """
    Handle Strava OAuth callback.

    Exchanges the code for tokens and stores them.
    """
    if error:
        logger.warning(f"Strava OAuth error: {error}")
        raise HTTPException(status_code=401, detail=f"Strava authorization denied: {error}")

    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    try:
        await services.tokens.exchange_code(code)
    except UserMismatch as e:
        logger.error(f"Strava callback rejected: {e}")
        raise HTTPException(status_code=500, detail="Authorized athlete is not the configured user")
    except AuthError as e:
        logger.error(f"Token exchange failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to exchange authorization code")

    logger.info(f"Strava connected, scope={scope}")
    return "Strava authorization successful"


# =============================================================================
# Data
# =============================================================================

@router.get("/data", response_model=StravaData)
async def strava_data(services: Services = Depends(get_services)):
    """Athlete stats plus totals over every ride."""
    try:
        stats = await services.strava.get_athlete_stats()
        rides = await services.strava.get_all_activities()
    except AuthError as e:
        logger.error(f"Strava data unavailable: {e}")
        raise HTTPException(status_code=401, detail="Strava not authorized")
    except (TransientNetworkError, StravaAPIError, DeserializationError) as e:
        logger.error(f"Failed to fetch strava data: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch data from Strava")

    return StravaData(stats=stats, rides=summarize_rides(rides))
