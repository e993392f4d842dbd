"""FastAPI dependency injection providers."""

from fastapi import Request

from cortexlab.api.market_client import MarketDataClient
from cortexlab.config import Settings
from cortexlab.web.cache import CacheService


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    return request.app.state.settings


def get_cache(request: Request) -> CacheService:
    """Get cache service from app state."""
    return request.app.state.cache


def get_market_client(request: Request) -> MarketDataClient:
    """Get the shared market data client from app state."""
    return request.app.state.market_client
