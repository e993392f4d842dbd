"""FastAPI application factory for the Cortex Lab API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cortexlab.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize and cleanup resources."""
    settings = app.state.settings
    logger.info("Starting Cortex Lab API...")

    from cortexlab.api.market_client import MarketDataClient
    from cortexlab.web.cache import CacheService

    app.state.market_client = MarketDataClient(
        delay=settings.market_request_delay,
        max_retries=settings.market_max_retries,
        backoff=settings.market_retry_backoff,
    )
    app.state.cache = await CacheService.create(settings.redis_url, settings.cache_ttl)

    logger.info("Cortex Lab API ready")
    yield

    if app.state.cache:
        await app.state.cache.close()
    logger.info("Cortex Lab API shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Cortex Lab API",
        description="Monte Carlo GBM price forecasts: volatility, percentile cones, outlook",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept"],
    )

    _register_routers(app)

    return app


def _register_routers(app: FastAPI):
    """Register all API routers."""
    from cortexlab.web.routers.outlook import router as outlook_router
    from cortexlab.web.routers.simulation import router as simulation_router
    from cortexlab.web.routers.system import router as system_router

    app.include_router(simulation_router, prefix="/api/v1")
    app.include_router(outlook_router, prefix="/api/v1")
    app.include_router(system_router, prefix="/api/v1")
