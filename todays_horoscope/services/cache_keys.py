"""
Cache key scheme.

Every cache read and write goes through these helpers so that the read path
and the write path can never disagree on key format.

    horoscope:date=2024-06-15&sign=aries&type=daily
"""

import json
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Union

from todays_horoscope.models.zodiac import HoroscopeType, ZodiacSign


class CacheKeyPrefix(str, Enum):
    """Key prefixes per content domain."""

    HOROSCOPE = "horoscope"
    RATE_LIMIT = "rate_limit"


def _stringify(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    return str(value)


def build_key(prefix: Union[CacheKeyPrefix, str], params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build a deterministic key: prefix, then "key=value" pairs sorted by name
    and joined with "&". Arrays are joined with "," and objects are JSON.
    """
    key = prefix.value if isinstance(prefix, CacheKeyPrefix) else prefix
    if not params:
        return key
    pairs = "&".join(
        f"{name}={_stringify(params[name])}" for name in sorted(params)
    )
    return f"{key}:{pairs}"


def period_start(horoscope_type: HoroscopeType, day: date) -> date:
    """First day of the period containing `day` (ISO Monday for weeks)."""
    if horoscope_type is HoroscopeType.WEEKLY:
        return day - timedelta(days=day.weekday())
    if horoscope_type is HoroscopeType.MONTHLY:
        return day.replace(day=1)
    return day


class HoroscopeKeys:
    """Horoscope cache keys."""

    @staticmethod
    def daily(sign: ZodiacSign, day: date) -> str:
        return build_key(
            CacheKeyPrefix.HOROSCOPE,
            {"sign": sign, "date": day, "type": HoroscopeType.DAILY},
        )

    @staticmethod
    def weekly(sign: ZodiacSign, day: date) -> str:
        return build_key(
            CacheKeyPrefix.HOROSCOPE,
            {
                "sign": sign,
                "date": period_start(HoroscopeType.WEEKLY, day),
                "type": HoroscopeType.WEEKLY,
            },
        )

    @staticmethod
    def monthly(sign: ZodiacSign, day: date) -> str:
        return build_key(
            CacheKeyPrefix.HOROSCOPE,
            {
                "sign": sign,
                "date": period_start(HoroscopeType.MONTHLY, day),
                "type": HoroscopeType.MONTHLY,
            },
        )

    @staticmethod
    def timezone_daily(sign: ZodiacSign, local_date: date) -> str:
        """Daily key bucketed by the requester's local calendar date."""
        return build_key(
            CacheKeyPrefix.HOROSCOPE,
            {"sign": sign, "local_date": local_date, "type": "timezone-daily"},
        )

    @classmethod
    def for_type(cls, sign: ZodiacSign, horoscope_type: HoroscopeType, day: date) -> str:
        """UTC-dated key for any forecast type."""
        if horoscope_type is HoroscopeType.WEEKLY:
            return cls.weekly(sign, day)
        if horoscope_type is HoroscopeType.MONTHLY:
            return cls.monthly(sign, day)
        return cls.daily(sign, day)


def rate_limit_key(client_id: str) -> str:
    return build_key(CacheKeyPrefix.RATE_LIMIT, {"client": client_id})


horoscope_keys = HoroscopeKeys()
