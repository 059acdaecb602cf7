"""
Horoscope Service - the read path.

Validates the request, resolves the cache key (timezone-bucketed for daily
content when timezone mode is on), serves from cache when it can, and on a
miss either runs a full batch for the requester's local day or generates a
single record.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from todays_horoscope.config import Settings, settings as default_settings
from todays_horoscope.exceptions import GenerationFailed, InvalidInput
from todays_horoscope.feature_flags import FeatureFlag, is_feature_enabled
from todays_horoscope.models.horoscope import HoroscopeRecord
from todays_horoscope.models.zodiac import HoroscopeType, ZodiacSign
from todays_horoscope.services.batch_coordinator import BatchCoordinator, BatchResult
from todays_horoscope.services.cache_keys import horoscope_keys, period_start
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.content_generator import ContentGenerator
from todays_horoscope.services.llm_client import LanguageModel
from todays_horoscope.services.timezone import local_date, safe_timezone, utc_today

logger = logging.getLogger(__name__)


def parse_sign(value: Optional[str]) -> ZodiacSign:
    """Validate a sign from the request."""
    normalized = (value or "").strip().lower()
    try:
        return ZodiacSign(normalized)
    except ValueError:
        raise InvalidInput(
            f"Invalid sign. Must be one of: {', '.join(ZodiacSign.values())}"
        ) from None


def parse_type(value: Optional[str]) -> HoroscopeType:
    """Validate a forecast type from the request. Missing means daily."""
    normalized = (value or HoroscopeType.DAILY.value).strip().lower()
    try:
        return HoroscopeType(normalized)
    except ValueError:
        raise InvalidInput(
            f"Invalid type. Must be one of: {', '.join(HoroscopeType.values())}"
        ) from None


@dataclass
class HoroscopeResult:
    """A served record plus how it was obtained."""
    data: HoroscopeRecord
    served_from_cache: bool
    batch_generated: bool
    timezone_aware: bool
    timezone: str
    local_date: str
    cache_key: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "cached": self.served_from_cache,
            "batchGenerated": self.batch_generated,
            "timezoneAware": self.timezone_aware,
            "timezone": self.timezone,
            "localDate": self.local_date,
            "data": self.data.model_dump(mode="json"),
        }


@dataclass
class ResolvedKey:
    sign: ZodiacSign
    type: HoroscopeType
    timezone: str
    day: date
    key: str
    timezone_aware: bool


class HoroscopeService:
    """Serves horoscopes from cache, generating on a miss."""

    def __init__(
        self,
        cache: CacheStore,
        generator: ContentGenerator,
        batch: BatchCoordinator,
        caching_enabled: bool = True,
        timezone_aware: bool = False,
        lunar_order: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.cache = cache
        self.generator = generator
        self.batch = batch
        self.caching_enabled = caching_enabled
        self.timezone_aware = timezone_aware
        self.lunar_order = lunar_order
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve_key(
        self,
        sign: Optional[str],
        horoscope_type: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> ResolvedKey:
        """Validate inputs and work out which cache bucket the request reads."""
        sign_ = parse_sign(sign)
        type_ = parse_type(horoscope_type)
        tz = safe_timezone(tz_name)
        now = self.clock()

        if self.timezone_aware and type_ is HoroscopeType.DAILY:
            day = local_date(tz, now)
            return ResolvedKey(sign_, type_, tz, day, horoscope_keys.timezone_daily(sign_, day), True)

        day = period_start(type_, utc_today(now))
        return ResolvedKey(sign_, type_, tz, day, horoscope_keys.for_type(sign_, type_, day), False)

    async def get_horoscope(
        self,
        sign: Optional[str],
        horoscope_type: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> HoroscopeResult:
        """
        Return the horoscope for a sign.

        Raises InvalidInput before any cache or generation work, and
        GenerationFailed when every fallback is exhausted.
        """
        resolved = self.resolve_key(sign, horoscope_type, tz_name)

        def result(record: HoroscopeRecord, from_cache: bool = False, batched: bool = False) -> HoroscopeResult:
            return HoroscopeResult(
                data=record,
                served_from_cache=from_cache,
                batch_generated=batched,
                timezone_aware=resolved.timezone_aware,
                timezone=resolved.timezone,
                local_date=resolved.day.isoformat(),
                cache_key=resolved.key if self.caching_enabled else None,
            )

        if not self.caching_enabled:
            record = await self.generator.generate(resolved.sign, resolved.type, resolved.day)
            return result(record)

        cached = await self._read_cached(resolved.key)
        if cached is not None:
            logger.debug(f"Cache hit for {resolved.key}")
            return result(cached, from_cache=True)

        if resolved.timezone_aware:
            batch = await self.batch.generate_batch(
                resolved.day, resolved.type, timezone_bucketed=True
            )
            record = batch.results.get(resolved.sign.value)
            if record is not None:
                return result(record, batched=True)
            logger.warning(
                f"Batch for {resolved.day} produced no {resolved.sign.value}; "
                "falling back to single generation"
            )

        record = await self.generator.generate(resolved.sign, resolved.type, resolved.day)
        await self.cache.set_json(
            resolved.key, record.model_dump(mode="json"), resolved.type.ttl_seconds
        )
        return result(record)

    async def _read_cached(self, key: str) -> Optional[HoroscopeRecord]:
        payload = await self.cache.get_json(key)
        if payload is None:
            return None
        try:
            record = HoroscopeRecord.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Cached horoscope at {key} failed validation: {e}")
            await self.cache.delete(key)
            return None
        if not record.is_complete:
            logger.warning(f"Cached horoscope at {key} is incomplete; regenerating")
            return None
        return record

    def ordered_signs(self) -> List[ZodiacSign]:
        return ZodiacSign.lunar_order() if self.lunar_order else list(ZodiacSign)

    async def get_all_horoscopes(
        self,
        horoscope_type: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> Dict[str, Optional[HoroscopeResult]]:
        """
        Every sign's horoscope, or None for signs that could not be produced.

        Signs are read in order, so in timezone mode the first miss fills
        the whole bucket and the rest are cache hits.
        """
        parse_type(horoscope_type)
        horoscopes: Dict[str, Optional[HoroscopeResult]] = {}
        for sign in self.ordered_signs():
            try:
                horoscopes[sign.value] = await self.get_horoscope(sign.value, horoscope_type, tz_name)
            except GenerationFailed as e:
                logger.error(f"No horoscope available for {sign.value}: {e.message}")
                horoscopes[sign.value] = None
        return horoscopes

    async def regenerate(self, sign: Optional[str]) -> Tuple[HoroscopeRecord, str]:
        """Force a fresh daily record for today's UTC date and cache it."""
        sign_ = parse_sign(sign)
        day = utc_today(self.clock())
        record = await self.generator.generate(sign_, HoroscopeType.DAILY, day)
        key = horoscope_keys.daily(sign_, day)
        await self.cache.set_json(key, record.model_dump(mode="json"), HoroscopeType.DAILY.ttl_seconds)
        logger.info(f"Regenerated horoscope for {sign_.value} at {key}")
        return record, key

    async def generate_daily_batch(
        self,
        target_date: Optional[date] = None,
        timezone_bucketed: Optional[bool] = None,
    ) -> BatchResult:
        """
        Scheduled batch for one day (default: today UTC).

        In timezone mode the records land in the timezone bucket for that
        calendar date, which is where the read path looks. Pass
        timezone_bucketed to override the mode.
        """
        day = target_date or utc_today(self.clock())
        if timezone_bucketed is None:
            timezone_bucketed = self.timezone_aware
        return await self.batch.generate_batch(
            day, HoroscopeType.DAILY, timezone_bucketed=timezone_bucketed
        )

    async def invalidate(
        self,
        sign: Optional[str],
        horoscope_type: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> Tuple[str, bool]:
        """Delete the entry the read path would use for this request."""
        resolved = self.resolve_key(sign, horoscope_type, tz_name)
        return resolved.key, await self.cache.delete(resolved.key)

    async def cache_status(self, day: Optional[date] = None) -> Dict[str, Dict[str, Any]]:
        """Presence and a short preview of each sign's UTC daily entry."""
        day = day or utc_today(self.clock())
        status: Dict[str, Dict[str, Any]] = {}
        for sign in ZodiacSign:
            key = horoscope_keys.daily(sign, day)
            if not await self.cache.exists(key):
                status[sign.value] = {"exists": False, "key": key}
                continue
            record = await self._read_cached(key)
            status[sign.value] = {
                "exists": True,
                "key": key,
                "complete": record is not None,
                "preview": {
                    "message": record.message[:50] + "...",
                    "quote_author": record.quote_author,
                    "best_match": record.best_match,
                } if record else None,
            }
        return status


def build_horoscope_service(
    cache: CacheStore,
    model: LanguageModel,
    settings: Optional[Settings] = None,
) -> HoroscopeService:
    """Wire the generator, batch coordinator and read path from settings."""
    settings = settings or default_settings
    generator = ContentGenerator(model)
    return HoroscopeService(
        cache=cache,
        generator=generator,
        batch=BatchCoordinator(generator, cache),
        caching_enabled=cache.enabled and is_feature_enabled(FeatureFlag.USE_REDIS_CACHE, settings),
        timezone_aware=is_feature_enabled(FeatureFlag.USE_TIMEZONE_CONTENT, settings),
        lunar_order=is_feature_enabled(FeatureFlag.USE_LUNAR_ZODIAC_ORDER, settings),
    )
