"""
Content Generator - single-shot horoscope generation.

Builds the prompt, calls the language model, strictly parses the JSON reply
into a GeneratedHoroscope and then repairs fields the model commonly gets
wrong. Either a complete HoroscopeRecord comes back or GenerationFailed is
raised; nothing partial leaves this module. Caching is the caller's job.
"""

import json
import logging
import random
from datetime import date
from typing import Optional

from pydantic import ValidationError

from todays_horoscope.constants import QUOTE_AUTHOR_ALIASES, QUOTE_AUTHORS
from todays_horoscope.exceptions import GenerationFailed
from todays_horoscope.models.horoscope import (
    GeneratedHoroscope,
    HoroscopeRecord,
    split_sign_list,
)
from todays_horoscope.models.zodiac import HoroscopeType, ZodiacSign
from todays_horoscope.services.llm_client import LanguageModel
from todays_horoscope.services.prompts import build_horoscope_prompt
from todays_horoscope.services.timezone import utc_today

logger = logging.getLogger(__name__)

MIN_BEST_MATCHES = 3
MAX_BEST_MATCHES = 4


def match_quote_author(author: Optional[str]) -> Optional[str]:
    """Canonical allow-listed name the author matches, if any."""
    if not author:
        return None
    lowered = author.lower()
    for canonical, aliases in QUOTE_AUTHOR_ALIASES.items():
        if any(alias.lower() in lowered for alias in aliases):
            return canonical
    return None


def repair_best_match(sign: ZodiacSign, best_match: str) -> str:
    """
    Normalise a best-match list: known signs only, never the sign itself,
    Libra/Aquarius always paired, topped up from elemental harmony when too
    short, cut back to four when too long, then sorted.
    """
    valid = set(ZodiacSign.values())
    matches = {
        token for token in split_sign_list(best_match)
        if token in valid and token != sign.value
    }

    paired = sign.paired_sign
    if paired is not None:
        matches.add(paired.value)

    if len(matches) < MIN_BEST_MATCHES:
        for candidate in sign.elemental_matches():
            if len(matches) >= MIN_BEST_MATCHES:
                break
            matches.add(candidate.value)

    if len(matches) > MAX_BEST_MATCHES:
        kept = [paired.value] if paired is not None else []
        others = sorted(m for m in matches if m not in kept)
        matches = set(kept + others[:MAX_BEST_MATCHES - len(kept)])

    return ", ".join(sorted(matches))


class ContentGenerator:
    """Generates one horoscope record per call."""

    def __init__(self, model: LanguageModel, rng: Optional[random.Random] = None):
        self.model = model
        self.rng = rng or random.Random()

    async def generate(
        self,
        sign: ZodiacSign,
        horoscope_type: HoroscopeType = HoroscopeType.DAILY,
        target_date: Optional[date] = None,
    ) -> HoroscopeRecord:
        """Generate, validate and repair a record for `sign`."""
        target_date = target_date or utc_today()
        prompt = build_horoscope_prompt(sign, horoscope_type)

        try:
            content = await self.model.generate_content(prompt)
        except GenerationFailed as e:
            e.sign = sign.value
            raise
        except Exception as e:
            logger.error(f"Generation call failed for {sign.value}: {e}")
            raise GenerationFailed(f"Failed to generate horoscope: {e}", sign=sign.value) from e

        generated = self.parse(sign, content)
        return self.repair(sign, horoscope_type, target_date, generated)

    def parse(self, sign: ZodiacSign, content: str) -> GeneratedHoroscope:
        """Strictly parse model output; anything malformed fails the call."""
        try:
            payload = json.loads(content)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing horoscope JSON for {sign.value}: {e}")
            raise GenerationFailed("Failed to generate horoscope: response was not JSON", sign=sign.value) from e

        if not isinstance(payload, dict):
            raise GenerationFailed("Failed to generate horoscope: response was not an object", sign=sign.value)

        try:
            return GeneratedHoroscope.model_validate(payload)
        except ValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            logger.error(f"Incomplete horoscope for {sign.value}: {missing}")
            raise GenerationFailed(
                f"Failed to generate horoscope: missing or invalid {', '.join(missing)}",
                sign=sign.value,
            ) from e

    def repair(
        self,
        sign: ZodiacSign,
        horoscope_type: HoroscopeType,
        target_date: date,
        generated: GeneratedHoroscope,
    ) -> HoroscopeRecord:
        author = match_quote_author(generated.quote_author)
        if author is None:
            author = self.rng.choice(QUOTE_AUTHORS)
            logger.warning(
                f"Invalid quote author {generated.quote_author!r} for {sign.value}. Using {author}."
            )

        return HoroscopeRecord(
            sign=sign,
            type=horoscope_type,
            date=target_date.isoformat(),
            message=generated.message,
            best_match=repair_best_match(sign, generated.best_match),
            inspirational_quote=generated.inspirational_quote,
            quote_author=author,
            peaceful_thought=generated.peaceful_thought,
            lucky_number=generated.lucky_number,
            lucky_color=generated.lucky_color,
            mood=generated.mood,
        )
