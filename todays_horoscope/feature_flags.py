"""
Feature flags.
Each flag is a boolean settings field, so FEATURE_FLAG_USE_REDIS_CACHE=false
in the environment switches the cache off.
"""

from enum import Enum
from typing import Optional

from todays_horoscope.config import Settings, settings as default_settings


class FeatureFlag(str, Enum):
    """Known feature flags (values are the env var names)."""

    USE_REDIS_CACHE = "FEATURE_FLAG_USE_REDIS_CACHE"
    USE_RATE_LIMITING = "FEATURE_FLAG_USE_RATE_LIMITING"
    USE_TIMEZONE_CONTENT = "FEATURE_FLAG_USE_TIMEZONE_CONTENT"
    USE_LUNAR_ZODIAC_ORDER = "FEATURE_FLAG_USE_LUNAR_ZODIAC_ORDER"


def is_feature_enabled(flag: FeatureFlag, settings: Optional[Settings] = None) -> bool:
    """Whether the flag is switched on for the given (or process) settings."""
    settings = settings or default_settings
    return bool(getattr(settings, flag.value.lower()))
