"""
trailwatch API

FastAPI application: beacon webhook, trail status and Strava setup
routes, plus the background beacon poller.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI

from trailwatch import __version__
from trailwatch.config import settings
from trailwatch.db.session import init_db, AsyncSessionLocal
from trailwatch.api.router import api_router, webhook_router
from trailwatch.features.beacon import Role, resolve_role
from trailwatch.services import build_services


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info(f"Starting server at host: {settings.host_uri}")
    await init_db()
    logger.info("Database initialized")

    services = build_services(settings, AsyncSessionLocal)
    app.state.services = services

    role = resolve_role(settings.fly_region, settings.primary_region)
    if role == Role.LEADER:
        await services.poller.start()

    yield

    # Shutdown
    await services.aclose()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="trailwatch",
    description="Is Troy on the trails?",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Routes ===
app.include_router(webhook_router)
app.include_router(api_router, prefix="/api")


# === Health Check ===
@app.get("/healthcheck")
async def health_check():
    """Health check endpoint."""
    return "Ok"


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run("trailwatch.main:app", host="0.0.0.0", port=settings.port)
