"""System endpoints: health check."""

from fastapi import APIRouter, Depends

from cortexlab.web.cache import CacheService
from cortexlab.web.dependencies import get_cache
from cortexlab.web.schemas import HealthResponse

router = APIRouter(tags=["system"])

API_VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health(cache: CacheService = Depends(get_cache)):
    """API health check."""
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        cache_type="redis" if cache.is_redis else "memory",
    )
