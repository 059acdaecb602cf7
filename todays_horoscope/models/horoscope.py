"""Horoscope record models - the unit of cached content."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todays_horoscope.models.zodiac import HoroscopeType, ZodiacSign


def _coerce_text(value: Any) -> Any:
    """Flatten numbers, lists and small objects from model output into text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return " - ".join(str(v) for v in value.values() if v not in (None, ""))
    return value


def split_sign_list(value: str) -> List[str]:
    """Split a comma-separated sign list into lowercase, stripped tokens."""
    return [token.strip().lower() for token in value.split(",") if token.strip()]


class GeneratedHoroscope(BaseModel):
    """
    Shape expected from the language model's JSON response.

    Required fields must be present and non-empty; anything else the model
    adds is ignored.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    message: str = Field(min_length=1)
    best_match: str = Field(min_length=1)
    inspirational_quote: str = Field(min_length=1)
    quote_author: str = Field(min_length=1)
    peaceful_thought: Optional[str] = None
    lucky_number: Optional[str] = None
    lucky_color: Optional[str] = None
    mood: Optional[str] = None

    @field_validator(
        "best_match", "peaceful_thought", "lucky_number", "lucky_color", "mood",
        mode="before",
    )
    @classmethod
    def _flatten(cls, value: Any) -> Any:
        return _coerce_text(value)


class HoroscopeRecord(BaseModel):
    """A servable horoscope for one sign, type and date bucket."""

    model_config = ConfigDict(extra="ignore")

    sign: ZodiacSign
    type: HoroscopeType
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    message: str
    best_match: str
    inspirational_quote: str
    quote_author: str
    peaceful_thought: Optional[str] = None
    lucky_number: Optional[str] = None
    lucky_color: Optional[str] = None
    mood: Optional[str] = None

    @field_validator("lucky_number", "lucky_color", "peaceful_thought", "mood", mode="before")
    @classmethod
    def _flatten(cls, value: Any) -> Any:
        return _coerce_text(value)

    @property
    def is_complete(self) -> bool:
        """Complete records are servable; the UI shows anything else as loading."""
        return all(
            value.strip()
            for value in (
                self.message,
                self.best_match,
                self.inspirational_quote,
                self.quote_author,
            )
        )
