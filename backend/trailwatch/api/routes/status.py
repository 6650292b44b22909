"""
Trail Status Route
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from trailwatch.api.deps import get_services
from trailwatch.services import Services

router = APIRouter()


class TroyStatusResponse(BaseModel):
    is_on_trail: bool
    beacon_url: Optional[str] = None
    trail_status_updated: Optional[datetime] = None


@router.get("/troy-check", response_model=TroyStatusResponse)
async def troy_check(services: Services = Depends(get_services)):
    """Is Troy on the trails right now?"""
    status = await services.status_store.get_status()
    return TroyStatusResponse(
        is_on_trail=status.is_on_trail,
        beacon_url=status.beacon_url,
        trail_status_updated=status.trail_status_updated,
    )
