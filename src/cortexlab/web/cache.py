"""History cache, Redis with in-memory fallback.

Only raw market history is cached; volatility and simulation results are
recomputed on every request.
"""

import json
import logging

from cachetools import TTLCache

from cortexlab.api.market_client import PricePoint, normalize_range

logger = logging.getLogger(__name__)


def history_key(symbol: str, range_key: str | None) -> str:
    # Same fallback as the fetch, so aliases of 1M share one entry
    return f"history:{symbol.upper()}:{normalize_range(range_key)}"


class CacheService:
    """Price-history cache backed by Redis or an in-memory TTLCache."""

    def __init__(self, redis_client=None, ttl: int = 300):
        self._redis = redis_client
        self._ttl = ttl
        self._memory: TTLCache = TTLCache(maxsize=512, ttl=ttl)

    @classmethod
    async def create(cls, redis_url: str, ttl: int = 300) -> "CacheService":
        """Connect to Redis when reachable, otherwise cache in process."""
        try:
            import redis.asyncio as aioredis

            client = aioredis.from_url(redis_url, decode_responses=True)
            await client.ping()
            logger.info("Cache: Connected to Redis")
            return cls(redis_client=client, ttl=ttl)
        except Exception as e:
            logger.warning("Cache: Redis unavailable (%s), using in-memory TTLCache", e)
            return cls(redis_client=None, ttl=ttl)

    async def get_history(self, symbol: str, range_key: str) -> list[PricePoint] | None:
        key = history_key(symbol, range_key)
        if self._redis is None:
            return self._memory.get(key)
        try:
            raw = await self._redis.get(key)
        except Exception as e:
            logger.warning("Cache get error for %s: %s", key, e)
            return None
        return json.loads(raw) if raw is not None else None

    async def set_history(self, symbol: str, range_key: str, points: list[PricePoint]) -> None:
        key = history_key(symbol, range_key)
        if self._redis is None:
            self._memory[key] = points
            return
        try:
            await self._redis.setex(key, self._ttl, json.dumps(points))
        except Exception as e:
            logger.warning("Cache set error for %s: %s", key, e)

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()

    @property
    def is_redis(self) -> bool:
        return self._redis is not None
