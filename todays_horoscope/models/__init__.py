"""Models package for horoscope content."""

from todays_horoscope.models.zodiac import Element, HoroscopeType, ZodiacSign
from todays_horoscope.models.horoscope import GeneratedHoroscope, HoroscopeRecord

__all__ = [
    "Element",
    "HoroscopeType",
    "ZodiacSign",
    "GeneratedHoroscope",
    "HoroscopeRecord",
]
