"""Services package."""

from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.content_generator import ContentGenerator
from todays_horoscope.services.batch_coordinator import BatchCoordinator, BatchResult
from todays_horoscope.services.horoscope_service import (
    HoroscopeResult,
    HoroscopeService,
    build_horoscope_service,
)
from todays_horoscope.services.llm_client import OpenAILanguageModel

__all__ = [
    "CacheStore",
    "ContentGenerator",
    "BatchCoordinator",
    "BatchResult",
    "HoroscopeResult",
    "HoroscopeService",
    "build_horoscope_service",
    "OpenAILanguageModel",
]
