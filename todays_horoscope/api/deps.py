from typing import Optional

from fastapi import Header, HTTPException, Request, status

from todays_horoscope.config import settings
from todays_horoscope.feature_flags import FeatureFlag, is_feature_enabled
from todays_horoscope.services.cache_keys import rate_limit_key
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.horoscope_service import HoroscopeService
from todays_horoscope.services.llm_client import OpenAILanguageModel


def get_horoscope_service(request: Request) -> HoroscopeService:
    """The service built once at startup by the lifespan handler."""
    return request.app.state.horoscope_service


def get_cache_store(request: Request) -> CacheStore:
    return request.app.state.cache_store


def get_language_model(request: Request) -> OpenAILanguageModel:
    return request.app.state.language_model


async def verify_admin_key(
    x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key"),
) -> None:
    """
    Guard debug endpoints with the admin key.
    Open when ADMIN_API_KEY is not configured (local development).
    """
    valid_key = settings.admin_api_key
    if not valid_key:
        return

    if not x_admin_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin key",
        )
    if x_admin_key != valid_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key",
        )


async def verify_cron_secret(
    authorization: Optional[str] = Header(None),
) -> None:
    """Scheduled callers must send Authorization: Bearer <CRON_SECRET> when one is set."""
    if not settings.cron_secret:
        return
    if authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


async def check_rate_limit(request: Request) -> None:
    """
    At most RATE_LIMIT_MAX_REQUESTS reads per RATE_LIMIT_SECONDS window per
    client IP, counted in the cache store. Requests pass when the flag is off
    or the cache is unreachable.
    """
    if not is_feature_enabled(FeatureFlag.USE_RATE_LIMITING):
        return

    cache: CacheStore = request.app.state.cache_store
    client_ip = request.client.host if request.client else "unknown"
    count = await cache.hit(rate_limit_key(client_ip), settings.rate_limit_seconds)

    if count is not None and count > settings.rate_limit_max_requests:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please wait a moment.",
        )
