"""
Pytest configuration and fixtures.
"""

import sys
import os
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import pytest

# Add app to path
sys.path.append(os.getcwd())

# Environment must be in place before settings are first imported
os.environ["APP_ENV"] = "development"
os.environ.pop("REDIS_URL", None)
os.environ.pop("OPENAI_API_KEY", None)
os.environ["FEATURE_FLAG_USE_REDIS_CACHE"] = "true"
os.environ["FEATURE_FLAG_USE_TIMEZONE_CONTENT"] = "false"
os.environ["FEATURE_FLAG_USE_RATE_LIMITING"] = "false"
os.environ["FEATURE_FLAG_USE_LUNAR_ZODIAC_ORDER"] = "false"

from todays_horoscope.constants import QUOTE_AUTHORS
from todays_horoscope.services.batch_coordinator import BatchCoordinator
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.content_generator import ContentGenerator
from todays_horoscope.services.horoscope_service import HoroscopeService

# 2024-06-15 22:00 UTC: already 2024-06-16 in Tokyo, still the 15th in Los Angeles
FIXED_NOW = datetime(2024, 6, 15, 22, 0, tzinfo=timezone.utc)


def horoscope_json(
    author: str = "Seneca",
    best_match: Any = "leo, gemini, libra",
    **overrides: Any,
) -> str:
    """A model reply in the shape the generation prompt asks for."""
    payload: Dict[str, Any] = {
        "message": "Notice the quiet between your thoughts today.",
        "lucky_number": "7 - a number of reflection",
        "lucky_color": "Sage green - growth and calm",
        "best_match": best_match,
        "inspirational_quote": "We suffer more often in imagination than in reality.",
        "quote_author": author,
        "peaceful_thought": "Let the day settle like leaves on still water.",
    }
    payload.update(overrides)
    return json.dumps(payload)


def distinct_replies(count: int, start: int = 0) -> List[str]:
    """Replies whose authors never repeat, so no batch retries happen."""
    return [horoscope_json(author=a) for a in QUOTE_AUTHORS[start:start + count]]


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis (decode_responses=True)."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def set(self, key: str, value: Any, ex: Optional[int] = None, nx: bool = False) -> Optional[bool]:
        if nx and key in self.store:
            return None
        self.store[key] = str(value)
        self.ttls[key] = ex
        return True

    async def incr(self, key: str) -> int:
        value = int(self.store.get(key, "0")) + 1
        self.store[key] = str(value)
        self.ttls.setdefault(key, None)
        return value

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


class ScriptedModel:
    """
    Language model double. Replies are served in order; once the script runs
    out every call gets `default`. Exceptions in the script are raised.
    """

    configured = True
    model = "scripted"

    def __init__(self, replies: Optional[List[Union[str, Exception]]] = None, default: Optional[str] = None):
        self.replies = list(replies or [])
        self.default = default or horoscope_json()
        self.prompts: List[str] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate_content(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(fake_redis) -> CacheStore:
    return CacheStore(fake_redis, namespace="horoscope-prod")


@pytest.fixture
def model() -> ScriptedModel:
    return ScriptedModel()


@pytest.fixture
def make_service(cache, model):
    """Build a HoroscopeService over the fake cache and scripted model."""

    def _make(**kwargs) -> HoroscopeService:
        generator = ContentGenerator(kwargs.pop("model", model))
        store = kwargs.pop("cache", cache)
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        return HoroscopeService(
            cache=store,
            generator=generator,
            batch=BatchCoordinator(generator, store),
            **kwargs,
        )

    return _make
