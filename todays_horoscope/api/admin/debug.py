"""
Debug Endpoints.
Cache inspection, manual regeneration and cache busting.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from todays_horoscope.api.deps import (
    get_cache_store,
    get_horoscope_service,
    get_language_model,
    verify_admin_key,
)
from todays_horoscope.config import settings
from todays_horoscope.feature_flags import FeatureFlag, is_feature_enabled
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.horoscope_service import HoroscopeService
from todays_horoscope.services.llm_client import OpenAILanguageModel
from todays_horoscope.services.prompts import PROMPT_VERSION
from todays_horoscope.services.timezone import (
    current_hour_in_timezone,
    is_next_day_from_utc,
    local_date,
    safe_timezone,
)

router = APIRouter(
    prefix="/api/debug",
    tags=["debug"],
    dependencies=[Depends(verify_admin_key)],
)
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def debug_status(
    tz_name: Optional[str] = Query(None, alias="timezone"),
    cache: CacheStore = Depends(get_cache_store),
    model: OpenAILanguageModel = Depends(get_language_model),
    service: HoroscopeService = Depends(get_horoscope_service),
):
    """Configuration, connectivity and the requester's timezone bucket."""
    cache_status = await service.cache_status()
    tz = safe_timezone(tz_name)
    now = service.clock()
    return {
        "redis": {
            "enabled": is_feature_enabled(FeatureFlag.USE_REDIS_CACHE),
            "configured": cache.enabled,
            "connected": await cache.ping(),
            "cachedSigns": [s for s, info in cache_status.items() if info["exists"]],
        },
        "openai": {
            "apiKeyConfigured": model.configured,
            "model": model.model,
            "promptVersion": PROMPT_VERSION,
        },
        "timezone": {
            "requested": tz_name,
            "resolved": tz,
            "localDate": local_date(tz, now).isoformat(),
            "localHour": current_hour_in_timezone(tz, now),
            "isNextDayFromUtc": is_next_day_from_utc(tz, now),
            "timezoneAware": service.timezone_aware,
        },
        "featureFlags": {
            flag.value: is_feature_enabled(flag) for flag in FeatureFlag
        },
        "environment": settings.app_env,
    }


@router.get("/ping")
async def ping(request: Request):
    """Simple availability check."""
    logger.debug(f"Ping from origin: {request.headers.get('origin')}")
    return {
        "success": True,
        "message": "API is running",
        "timestamp": _timestamp(),
    }


@router.get("/redis")
async def debug_redis(
    service: HoroscopeService = Depends(get_horoscope_service),
):
    """Per-sign presence of today's UTC daily entries."""
    status = await service.cache_status()
    return {
        "success": True,
        "timestamp": _timestamp(),
        "redis": {"results": status},
    }


@router.get("/regenerate-horoscopes")
async def regenerate_one(
    sign: Optional[str] = Query(None),
    service: HoroscopeService = Depends(get_horoscope_service),
):
    """Regenerate and cache today's horoscope for a single sign."""
    record, key = await service.regenerate(sign)
    return {
        "success": True,
        "sign": record.sign.value,
        "key": key,
        "timestamp": _timestamp(),
        "message": f"Successfully regenerated and cached horoscope for {record.sign.value}",
        "data": record.model_dump(mode="json"),
    }


@router.post("/regenerate-horoscopes")
async def regenerate_all(
    service: HoroscopeService = Depends(get_horoscope_service),
):
    """Regenerate and cache today's horoscopes for all signs."""
    batch = await service.generate_daily_batch()
    return {
        "success": True,
        "timestamp": _timestamp(),
        "date": batch.date.isoformat(),
        "authorCounts": batch.author_counts,
        "attributionUnmet": [u.sign for u in batch.attribution_unmet],
        **batch.summary(),
    }


@router.delete("/cache")
async def bust_cache(
    sign: Optional[str] = Query(None),
    type: Optional[str] = Query("daily"),
    timezone: Optional[str] = Query(None),
    service: HoroscopeService = Depends(get_horoscope_service),
):
    """Delete the cache entry the read endpoint would serve for these params."""
    key, deleted = await service.invalidate(sign, type, timezone)
    return {"success": deleted, "key": key}
