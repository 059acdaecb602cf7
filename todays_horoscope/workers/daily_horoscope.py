"""
Daily Horoscope Worker.
Generates and caches the day's horoscopes for every sign.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from todays_horoscope.config import settings
from todays_horoscope.redis import close_redis_client, create_redis_client
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.horoscope_service import build_horoscope_service
from todays_horoscope.services.llm_client import OpenAILanguageModel
from todays_horoscope.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def generate_daily_horoscopes(self):
    """
    Celery task to generate and cache today's horoscopes.

    Runs daily at BATCH_SCHEDULE_HOUR_UTC.
    """
    try:
        summary = asyncio.run(_generate_batch())
        logger.info(
            f"Daily horoscope batch completed: {len(summary['results'])} generated, "
            f"{len(summary['errors'])} failed"
        )
        return summary
    except Exception as e:
        logger.error(f"Daily horoscope batch failed: {e}", exc_info=True)
        # Retry with exponential backoff
        raise self.retry(exc=e, countdown=60 * (2 ** self.request.retries))


@celery_app.task(bind=True)
def generate_horoscopes_for_date(self, date_str: str, timezone_bucketed: Optional[bool] = None):
    """
    Generate horoscopes for a specific date (for pre-generation).

    Args:
        date_str: Date in YYYY-MM-DD format
        timezone_bucketed: Write to the timezone-aware daily keys (default: follow the feature flag)
    """
    try:
        target_date = datetime.strptime(date_str, "%Y-%m-%d").date()
        summary = asyncio.run(_generate_batch(target_date, timezone_bucketed))
        logger.info(f"Generated horoscopes for {date_str}")
        return summary
    except Exception as e:
        logger.error(f"Horoscope generation failed for {date_str}: {e}")
        raise


async def _generate_batch(
    target_date: Optional[date] = None,
    timezone_bucketed: Optional[bool] = None,
) -> Dict[str, Any]:
    """Async implementation: one Redis client and model per task run."""
    redis_client = create_redis_client(settings.redis_url)
    model = OpenAILanguageModel(settings)
    try:
        service = build_horoscope_service(
            CacheStore(redis_client, namespace=settings.cache_namespace),
            model,
            settings,
        )
        batch = await service.generate_daily_batch(target_date, timezone_bucketed)
        return {
            "date": batch.date.isoformat(),
            "timezoneBucketed": batch.timezone_bucketed,
            "authorCounts": batch.author_counts,
            **batch.summary(),
        }
    finally:
        await model.close()
        await close_redis_client(redis_client)
