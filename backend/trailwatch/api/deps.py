"""
Request dependencies.

Services are built once in the app lifespan and read from app.state.
"""

from fastapi import HTTPException, Request

from trailwatch.services import Services


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return services
