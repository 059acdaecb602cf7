"""
Redis client configuration using redis-py (asyncio).

The client is created once by the process entry point (FastAPI lifespan or a
worker task) and handed to the cache store. Nothing here keeps a module-level
connection.
"""

from typing import Optional
import logging

from redis import asyncio as aioredis
from redis.asyncio.client import Redis

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: Optional[str]) -> Optional[Redis]:
    """
    Create an async Redis client with its own connection pool.
    
    Returns None when no URL is configured; the cache store then treats
    every read as a miss and every write as a no-op.
    """
    if not redis_url:
        logger.warning("REDIS_URL not set. Cache store will run disabled.")
        return None
    
    client = aioredis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=5.0,
        health_check_interval=30,
    )
    logger.info("Redis client initialized")
    return client


async def close_redis_client(client: Optional[Redis]) -> None:
    """Close Redis client."""
    if client is None:
        return
    await client.aclose()
    logger.info("Redis client closed")
