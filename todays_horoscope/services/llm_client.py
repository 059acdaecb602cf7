"""
OpenAI language-model client.
Turns a prompt into raw JSON text; parsing and validation live in the
content generator.
"""

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from todays_horoscope.config import Settings, settings as default_settings
from todays_horoscope.exceptions import GenerationFailed

logger = logging.getLogger(__name__)


class LanguageModel(Protocol):
    """Anything that can turn a prompt into text."""

    async def generate_content(self, prompt: str) -> str:
        ...


class OpenAILanguageModel:
    """Chat-completions client that asks for a JSON object response."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._client: Optional[AsyncOpenAI] = None

    @property
    def model(self) -> str:
        return self.settings.openai_model

    @property
    def configured(self) -> bool:
        return bool(self.settings.openai_api_key)

    def _get_client(self) -> AsyncOpenAI:
        if not self.configured:
            raise GenerationFailed("OpenAI API key not configured")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.openai_timeout_seconds,
            )
        return self._client

    async def generate_content(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                max_tokens=self.settings.openai_max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise GenerationFailed(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerationFailed("OpenAI returned an empty response")
        return content.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
