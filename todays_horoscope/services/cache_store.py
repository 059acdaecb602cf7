"""
Cache Store - namespaced, TTL-based key/value access over Redis.

Every operation is safe to call while Redis is down or unconfigured: failures
are logged and degrade to a miss or a no-op, so a cache outage costs latency
and generation spend but never availability.
"""

import json
import logging
from typing import Any, Optional

from redis.asyncio.client import Redis

from todays_horoscope.constants import CacheDurations
from todays_horoscope.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)


class CacheStore:
    """Async cache store adapter."""

    def __init__(self, client: Optional[Redis], namespace: str = "horoscope-prod"):
        self.client = client
        self.namespace = namespace

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def namespaced(self, key: str) -> str:
        """Prefix the namespace unless the key already carries it."""
        if not self.namespace or key.startswith(f"{self.namespace}:"):
            return key
        return f"{self.namespace}:{key}"

    def _require_client(self) -> Redis:
        if self.client is None:
            raise CacheUnavailable("Redis client not configured")
        return self.client

    async def get(self, key: str) -> Optional[str]:
        """Raw value for key, or None on miss or failure."""
        full_key = self.namespaced(key)
        try:
            value = await self._require_client().get(full_key)
        except CacheUnavailable:
            return None
        except Exception as e:
            logger.warning(f"Redis read failed for {full_key}: {e}")
            return None

        if value is None:
            logger.debug(f"Cache miss for key: {full_key}")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int = CacheDurations.ONE_HOUR) -> bool:
        """Store value with a TTL. Returns False if the write did not happen."""
        full_key = self.namespaced(key)
        try:
            await self._require_client().set(full_key, value, ex=ttl_seconds)
        except CacheUnavailable:
            return False
        except Exception as e:
            logger.warning(f"Redis write failed for {full_key}: {e}")
            return False

        logger.debug(f"Stored {full_key} (ttl={ttl_seconds}s)")
        return True

    async def delete(self, key: str) -> bool:
        full_key = self.namespaced(key)
        try:
            await self._require_client().delete(full_key)
        except CacheUnavailable:
            return False
        except Exception as e:
            logger.warning(f"Redis delete failed for {full_key}: {e}")
            return False

        logger.info(f"Invalidated cache key: {full_key}")
        return True

    async def exists(self, key: str) -> bool:
        full_key = self.namespaced(key)
        try:
            return bool(await self._require_client().exists(full_key))
        except CacheUnavailable:
            return False
        except Exception as e:
            logger.warning(f"Redis exists check failed for {full_key}: {e}")
            return False

    async def hit(self, key: str, window_seconds: int) -> Optional[int]:
        """
        Count one event in a fixed window starting at the first event.
        Returns the count so far, or None when it cannot be read.
        """
        full_key = self.namespaced(key)
        try:
            client = self._require_client()
            await client.set(full_key, 0, ex=window_seconds, nx=True)
            return int(await client.incr(full_key))
        except CacheUnavailable:
            return None
        except Exception as e:
            logger.warning(f"Redis counter failed for {full_key}: {e}")
            return None

    async def get_json(self, key: str) -> Optional[Any]:
        """
        Decode a JSON value. Undecodable entries are deleted and reported as a
        miss so the next request regenerates them.
        """
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"JSON parsing error for key {self.namespaced(key)}: {e}")
            await self.delete(key)
            return None

    async def set_json(self, key: str, data: Any, ttl_seconds: int = CacheDurations.ONE_HOUR) -> bool:
        if data is None:
            logger.warning(f"Attempted to store null for key: {self.namespaced(key)}")
            return False
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            logger.error(f"JSON serialization error for key {self.namespaced(key)}: {e}")
            return False
        return await self.set(key, payload, ttl_seconds)

    async def ping(self) -> bool:
        """Whether Redis answers right now."""
        try:
            return bool(await self._require_client().ping())
        except CacheUnavailable:
            return False
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False
