"""
Batch Coordinator - generate all twelve signs for one date bucket.

Signs are generated one after another, never concurrently: each sign's
attribution check needs the author counts of every sign before it. The
counts live only for the duration of one generate_batch() call.

The per-author cap is a soft limit. When retries cannot find an author under
the cap, the over-limit record is kept and an AttributionConstraintUnmet is
recorded; a batch always finishes in at most 12 x (1 + retries) generation
calls and always reports every sign as either a result or an error.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from todays_horoscope.constants import MAX_ATTRIBUTION_RETRIES, MAX_AUTHOR_USES_PER_BATCH
from todays_horoscope.exceptions import AttributionConstraintUnmet, GenerationFailed
from todays_horoscope.models.horoscope import HoroscopeRecord
from todays_horoscope.models.zodiac import HoroscopeType, ZodiacSign
from todays_horoscope.services.cache_keys import horoscope_keys, period_start
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.content_generator import ContentGenerator

logger = logging.getLogger(__name__)


@dataclass
class ErrorInfo:
    """Why a sign has no record in a batch."""
    sign: str
    error: str


@dataclass
class BatchResult:
    """Outcome of one batch run, keyed by sign value."""
    date: date
    type: HoroscopeType
    timezone_bucketed: bool
    results: Dict[str, HoroscopeRecord] = field(default_factory=dict)
    errors: Dict[str, ErrorInfo] = field(default_factory=dict)
    cached: Dict[str, bool] = field(default_factory=dict)
    attribution_unmet: List[AttributionConstraintUnmet] = field(default_factory=list)
    generation_calls: int = 0

    @property
    def author_counts(self) -> Dict[str, int]:
        return dict(Counter(r.quote_author for r in self.results.values()))

    def summary(self) -> Dict[str, List[dict]]:
        """Per-sign success/failure lists for the batch endpoints."""
        return {
            "results": [
                {
                    "sign": sign,
                    "success": self.cached.get(sign, False),
                    "best_match": record.best_match,
                    "quote_author": record.quote_author,
                }
                for sign, record in self.results.items()
            ],
            "errors": [
                {"sign": info.sign, "error": info.error}
                for info in self.errors.values()
            ],
        }


class BatchCoordinator:
    """Generates and caches a full cohort of twelve signs."""

    def __init__(
        self,
        generator: ContentGenerator,
        cache: CacheStore,
        max_author_uses: int = MAX_AUTHOR_USES_PER_BATCH,
        max_retries: int = MAX_ATTRIBUTION_RETRIES,
    ):
        self.generator = generator
        self.cache = cache
        self.max_author_uses = max_author_uses
        self.max_retries = max_retries

    def cache_key(
        self,
        sign: ZodiacSign,
        target_date: date,
        horoscope_type: HoroscopeType,
        timezone_bucketed: bool,
    ) -> str:
        if timezone_bucketed and horoscope_type is HoroscopeType.DAILY:
            return horoscope_keys.timezone_daily(sign, target_date)
        return horoscope_keys.for_type(sign, horoscope_type, target_date)

    async def generate_batch(
        self,
        target_date: date,
        horoscope_type: HoroscopeType = HoroscopeType.DAILY,
        timezone_bucketed: bool = False,
        signs: Optional[List[ZodiacSign]] = None,
    ) -> BatchResult:
        """
        Generate every sign for `target_date`, enforce the author cap, and
        write each record to the cache under its bucketed key.
        """
        record_date = period_start(horoscope_type, target_date)
        batch = BatchResult(
            date=record_date,
            type=horoscope_type,
            timezone_bucketed=timezone_bucketed,
        )
        usage: Counter = Counter()

        for sign in signs or list(ZodiacSign):
            record = await self._generate_for_sign(sign, horoscope_type, record_date, usage, batch)
            if record is None:
                continue

            batch.results[sign.value] = record
            key = self.cache_key(sign, record_date, horoscope_type, timezone_bucketed)
            batch.cached[sign.value] = await self.cache.set_json(
                key,
                record.model_dump(mode="json"),
                horoscope_type.ttl_seconds,
            )

        logger.info(
            f"Batch {horoscope_type.value} {record_date} "
            f"(timezone_bucketed={timezone_bucketed}): "
            f"{len(batch.results)} generated, {len(batch.errors)} failed, "
            f"{batch.generation_calls} generation calls"
        )
        return batch

    async def _generate_once(
        self,
        sign: ZodiacSign,
        horoscope_type: HoroscopeType,
        record_date: date,
        batch: BatchResult,
    ) -> HoroscopeRecord:
        batch.generation_calls += 1
        return await self.generator.generate(sign, horoscope_type, record_date)

    async def _generate_for_sign(
        self,
        sign: ZodiacSign,
        horoscope_type: HoroscopeType,
        record_date: date,
        usage: Counter,
        batch: BatchResult,
    ) -> Optional[HoroscopeRecord]:
        try:
            record = await self._generate_once(sign, horoscope_type, record_date, batch)
        except GenerationFailed as e:
            logger.error(f"Error generating horoscope for {sign.value}: {e.message}")
            batch.errors[sign.value] = ErrorInfo(sign=sign.value, error=e.message)
            return None

        author = record.quote_author
        usage[author] += 1
        if usage[author] <= self.max_author_uses:
            return record

        logger.info(
            f"{author} already used {self.max_author_uses} times. "
            f"Regenerating horoscope for {sign.value}..."
        )
        for attempt in range(1, self.max_retries + 1):
            try:
                candidate = await self._generate_once(sign, horoscope_type, record_date, batch)
            except GenerationFailed as e:
                logger.warning(f"Retry {attempt} for {sign.value} failed: {e.message}")
                continue

            new_author = candidate.quote_author
            if new_author != author and usage[new_author] < self.max_author_uses:
                usage[author] -= 1
                usage[new_author] += 1
                logger.info(f"Assigned {new_author} to {sign.value} on retry {attempt}")
                return candidate

        unmet = AttributionConstraintUnmet(sign=sign.value, author=author, uses=usage[author])
        logger.warning(unmet.message)
        batch.attribution_unmet.append(unmet)
        return record
