"""
Scheduled batch endpoint.
Generates and caches today's horoscopes for all signs.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from todays_horoscope.api.deps import get_horoscope_service, verify_cron_secret
from todays_horoscope.services.horoscope_service import HoroscopeService

router = APIRouter(prefix="/api/cron", tags=["cron"])
logger = logging.getLogger(__name__)


@router.get("/daily-horoscope")
async def run_daily_horoscope_batch(
    service: HoroscopeService = Depends(get_horoscope_service),
    _: None = Depends(verify_cron_secret),
):
    """
    Run the daily batch for today's UTC date.

    Intended for a daily scheduler. Per-sign failures are reported in
    `errors` and never fail the whole run.
    """
    batch = await service.generate_daily_batch()
    logger.info(
        f"Daily batch complete: {len(batch.results)} generated, {len(batch.errors)} failed"
    )

    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "date": batch.date.isoformat(),
        "timezoneBucketed": batch.timezone_bucketed,
        **batch.summary(),
    }
