"""
API Router

Combines all route modules.
"""

from fastapi import APIRouter

from trailwatch.api.routes import status, strava, webhooks

api_router = APIRouter()

api_router.include_router(status.router, tags=["Status"])
api_router.include_router(strava.router, prefix="/strava", tags=["Strava"])

# Mounted at the root, outside /api
webhook_router = APIRouter()

webhook_router.include_router(webhooks.router, tags=["Webhooks"])
