"""
Cache Warm-up Script
--------------------
Generates all twelve daily horoscopes for one date and writes them to the
cache, the same way the scheduled batch does.

Usage:
    python scripts/warm_cache.py
    python scripts/warm_cache.py --date 2024-03-15
    python scripts/warm_cache.py --timezone Asia/Tokyo

With --timezone the records go to the timezone-bucketed keys for that zone's
local date (or --date when given).
"""

import argparse
import asyncio
import os
import sys
from datetime import datetime

# Add project root to python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from todays_horoscope.config import settings
from todays_horoscope.logging_config import configure_logging
from todays_horoscope.redis import close_redis_client, create_redis_client
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.horoscope_service import build_horoscope_service
from todays_horoscope.services.llm_client import OpenAILanguageModel
from todays_horoscope.services.timezone import is_valid_timezone, local_date, utc_today


async def warm(target_date, timezone_bucketed: bool) -> int:
    redis_client = create_redis_client(settings.redis_url)
    if redis_client is None:
        print("❌ REDIS_URL is not set; nothing to warm")
        return 1

    model = OpenAILanguageModel(settings)
    try:
        service = build_horoscope_service(
            CacheStore(redis_client, namespace=settings.cache_namespace),
            model,
            settings,
        )
        batch = await service.generate_daily_batch(target_date, timezone_bucketed)
    finally:
        await model.close()
        await close_redis_client(redis_client)

    print(f"📅 {batch.date.isoformat()} (timezone_bucketed={batch.timezone_bucketed})")
    for sign, record in batch.results.items():
        mark = "✅" if batch.cached.get(sign) else "⚠️ not cached"
        print(f"  {mark} {sign}: {record.quote_author} | {record.best_match}")
    for info in batch.errors.values():
        print(f"  ❌ {info.sign}: {info.error}")
    for unmet in batch.attribution_unmet:
        print(f"  ⚠️ {unmet.message}")

    return 0 if not batch.errors else 2


def main() -> int:
    parser = argparse.ArgumentParser(description="Pre-generate and cache daily horoscopes")
    parser.add_argument("--date", help="Date to generate for (YYYY-MM-DD)")
    parser.add_argument("--timezone", help="IANA timezone; writes timezone-bucketed keys")
    args = parser.parse_args()

    configure_logging()

    if args.timezone and not is_valid_timezone(args.timezone):
        print(f"❌ Unknown timezone: {args.timezone}")
        return 1

    if args.date:
        try:
            target_date = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            print(f"❌ Invalid date: {args.date} (expected YYYY-MM-DD)")
            return 1
    elif args.timezone:
        target_date = local_date(args.timezone)
    else:
        target_date = utc_today()

    return asyncio.run(warm(target_date, timezone_bucketed=bool(args.timezone)))


if __name__ == "__main__":
    sys.exit(main())
