"""Cached access to market history for request handlers."""

import logging

from fastapi.concurrency import run_in_threadpool

from cortexlab.api.market_client import MarketDataClient, PricePoint
from cortexlab.web.cache import CacheService

logger = logging.getLogger(__name__)


async def load_history(
    client: MarketDataClient,
    cache: CacheService,
    symbol: str,
    range_key: str,
) -> tuple[list[PricePoint], bool]:
    """Return ``(points, cached)`` for a symbol and range.

    The provider call is blocking and runs in the threadpool. Empty
    responses are not cached.
    """
    cached = await cache.get_history(symbol, range_key)
    if cached:
        return cached, True

    points = await run_in_threadpool(client.get_history, symbol, range_key)
    if points:
        await cache.set_history(symbol, range_key, points)
    else:
        logger.warning("No history returned for %s (%s)", symbol, range_key)
    return points, False
