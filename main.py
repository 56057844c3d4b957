"""
AstrologyAPI Gateway — FastAPI Application

Architecture:
  - Client: astroclient (typed AstrologyAPI client, form encoder + dispatcher)
  - One AsyncAstrologyAPI per process, credentials fixed at startup
  - Diagnostics: dispatch table, dry-run previews, license availability probe
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings
from astroclient.api.routes import router
from astroclient.services.astrology_api import AsyncAstrologyAPI
from astroclient.services.auth import ClientConfig

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("=" * 60)
    logger.info("AstrologyAPI Gateway starting...")
    logger.info("=" * 60)

    config = ClientConfig.from_settings(settings)
    app.state.base_url = config.base_url
    app.state.astrology_api = None

    if config.has_credentials:
        app.state.astrology_api = AsyncAstrologyAPI(config)
        logger.info(f"AstrologyAPI client ready: {config.base_url}")
    else:
        logger.warning("AstrologyAPI credentials missing — upstream routes will return 503")

    yield

    # ── Shutdown ──────────────────────────────────────────────────
    if app.state.astrology_api is not None:
        await app.state.astrology_api.aclose()

    logger.info("Gateway shut down cleanly.")


app = FastAPI(
    title="AstrologyAPI Gateway",
    description=(
        "Typed gateway in front of json.astrologyapi.com.\n\n"
        "**Encoding**: single / composite (p_, s_) / hybrid bodies per endpoint\n"
        "**Preview**: see the exact form body before calling upstream\n"
        "**Availability**: probe which endpoints your license includes"
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "service": "AstrologyAPI Gateway",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
        "operations": "/api/v1/operations",
        "availability": "/api/v1/availability",
    }
