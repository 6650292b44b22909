"""
Beacon Webhook

The external trigger for a ride: an automation posts the live beacon
URL here when a ride starts. The path secret is derived from WH_SEED.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from trailwatch.api.deps import get_services
from trailwatch.config import settings
from trailwatch.services import Services

logger = logging.getLogger(__name__)

router = APIRouter()


class TrailEvent(BaseModel):
    beacon_url: str


@router.api_route("/wh/trail-event/{secret}", methods=["GET", "POST"])
async def trail_event(
    secret: str,
    request: Request,
    services: Services = Depends(get_services),
):
    """Store the beacon URL for the poller to pick up."""
    # Body is only parsed once the secret matches, so a wrong secret is
    # always a plain 404.
    if not hmac.compare_digest(secret, settings.webhook_secret):
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        event = TrailEvent.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"Rejected trail event: {e}")
        raise HTTPException(status_code=422, detail="Expected JSON body with beacon_url")

    logger.info(f"Received trail event, beacon url: {event.beacon_url}")
    await services.status_store.set_beacon_url(event.beacon_url)

    return {"status": "ok"}
