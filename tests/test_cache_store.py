"""
Tests for CacheStore.
"""

import json

import pytest
from unittest.mock import AsyncMock
from redis.exceptions import ConnectionError as RedisConnectionError

from todays_horoscope.services.cache_store import CacheStore


@pytest.mark.asyncio
async def test_json_round_trip(cache, fake_redis):
    """Values come back as written, under the namespaced key, with the TTL."""
    stored = await cache.set_json("horoscope:sign=leo", {"message": "hi"}, 120)

    assert stored is True
    assert "horoscope-prod:horoscope:sign=leo" in fake_redis.store
    assert fake_redis.ttls["horoscope-prod:horoscope:sign=leo"] == 120
    assert await cache.get_json("horoscope:sign=leo") == {"message": "hi"}


@pytest.mark.asyncio
async def test_namespace_not_applied_twice(cache):
    assert cache.namespaced("horoscope-prod:abc") == "horoscope-prod:abc"
    assert cache.namespaced("abc") == "horoscope-prod:abc"


@pytest.mark.asyncio
async def test_miss_returns_none(cache):
    assert await cache.get("missing") is None
    assert await cache.get_json("missing") is None
    assert await cache.exists("missing") is False


@pytest.mark.asyncio
async def test_delete_and_exists(cache):
    await cache.set("k", "v", 60)
    assert await cache.exists("k") is True

    assert await cache.delete("k") is True
    assert await cache.exists("k") is False


@pytest.mark.asyncio
async def test_undecodable_entry_deleted(cache, fake_redis):
    """A corrupted entry reads as a miss and is removed."""
    fake_redis.store["horoscope-prod:bad"] = "{not json"

    assert await cache.get_json("bad") is None
    assert "horoscope-prod:bad" not in fake_redis.store


@pytest.mark.asyncio
async def test_refuses_to_store_null(cache, fake_redis):
    assert await cache.set_json("k", None) is False
    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_outage_degrades_to_miss():
    """Every operation survives a Redis connection failure."""
    broken = AsyncMock()
    broken.get.side_effect = RedisConnectionError("down")
    broken.set.side_effect = RedisConnectionError("down")
    broken.delete.side_effect = RedisConnectionError("down")
    broken.exists.side_effect = RedisConnectionError("down")
    broken.ping.side_effect = RedisConnectionError("down")
    cache = CacheStore(broken)

    assert await cache.get_json("k") is None
    assert await cache.set_json("k", {"a": 1}, 60) is False
    assert await cache.delete("k") is False
    assert await cache.exists("k") is False
    assert await cache.hit("k", 60) is None
    assert await cache.ping() is False
    broken.get.assert_called_once_with("horoscope-prod:k")


@pytest.mark.asyncio
async def test_unconfigured_store_is_disabled():
    cache = CacheStore(None)

    assert cache.enabled is False
    assert await cache.get("k") is None
    assert await cache.set("k", "v") is False
    assert await cache.hit("k", 60) is None
    assert await cache.ping() is False


@pytest.mark.asyncio
async def test_set_passes_ttl_as_expiry():
    client = AsyncMock()
    cache = CacheStore(client, namespace="ns")

    await cache.set_json("k", [1, 2], 86400)

    client.set.assert_called_once_with("ns:k", json.dumps([1, 2]), ex=86400)


@pytest.mark.asyncio
async def test_hit_counts_within_window(cache, fake_redis):
    """The window's expiry is set by the first hit only."""
    assert await cache.hit("rl", 60) == 1
    fake_redis.ttls["horoscope-prod:rl"] = 42

    assert await cache.hit("rl", 60) == 2
    assert await cache.hit("rl", 60) == 3
    assert fake_redis.ttls["horoscope-prod:rl"] == 42


@pytest.mark.asyncio
async def test_hit_opens_window_atomically():
    client = AsyncMock()
    client.incr.return_value = 1
    cache = CacheStore(client, namespace="ns")

    assert await cache.hit("rl", 30) == 1
    client.set.assert_called_once_with("ns:rl", 0, ex=30, nx=True)
    client.incr.assert_called_once_with("ns:rl")
