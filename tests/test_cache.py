"""Tests for the history cache service."""

import pytest

from cortexlab.web.cache import CacheService, history_key


POINTS = [{"date": "2026-10-16", "open": 1.0, "close": 2.0}]


def test_history_key():
    assert history_key("nvda", "1y") == "history:NVDA:1Y"


def test_history_key_unknown_range_shares_one_month_entry():
    assert history_key("NVDA", "foo") == history_key("NVDA", "1M")
    assert history_key("NVDA", None) == "history:NVDA:1M"


@pytest.mark.asyncio
async def test_unknown_range_hits_one_month_entry():
    cache = CacheService(ttl=60)
    await cache.set_history("NVDA", "foo", POINTS)
    assert await cache.get_history("NVDA", "1M") == POINTS


@pytest.mark.asyncio
async def test_memory_roundtrip():
    cache = CacheService(ttl=60)
    assert await cache.get_history("NVDA", "1Y") is None
    await cache.set_history("nvda", "1y", POINTS)
    assert await cache.get_history("NVDA", "1Y") == POINTS
    assert await cache.get_history("NVDA", "1M") is None
    assert cache.is_redis is False


@pytest.mark.asyncio
async def test_create_falls_back_to_memory():
    cache = await CacheService.create("redis://localhost:1/0", ttl=60)
    assert cache.is_redis is False
    await cache.close()
