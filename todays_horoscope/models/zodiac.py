"""
Zodiac definitions.
The twelve signs and the three forecast types, with their display metadata.
"""

from enum import Enum
from typing import List, Optional, Tuple

from todays_horoscope.constants import CacheDurations


class Element(str, Enum):
    """Classical element of a sign."""
    
    FIRE = "fire"
    EARTH = "earth"
    AIR = "air"
    WATER = "water"
    
    @property
    def harmonizes_with(self) -> Tuple["Element", "Element"]:
        """Fire/Air and Earth/Water harmonize."""
        pairs = {
            Element.FIRE: (Element.FIRE, Element.AIR),
            Element.AIR: (Element.AIR, Element.FIRE),
            Element.EARTH: (Element.EARTH, Element.WATER),
            Element.WATER: (Element.WATER, Element.EARTH),
        }
        return pairs[self]


class ZodiacSign(str, Enum):
    """
    12 zodiac signs in lowercase canonical form.
    Values are what callers send as ?sign=.
    """
    
    ARIES = "aries"
    TAURUS = "taurus"
    GEMINI = "gemini"
    CANCER = "cancer"
    LEO = "leo"
    VIRGO = "virgo"
    LIBRA = "libra"
    SCORPIO = "scorpio"
    SAGITTARIUS = "sagittarius"
    CAPRICORN = "capricorn"
    AQUARIUS = "aquarius"
    PISCES = "pisces"
    
    @property
    def display_name(self) -> str:
        return self.value.capitalize()
    
    @property
    def element(self) -> Element:
        elements = {
            ZodiacSign.ARIES: Element.FIRE,
            ZodiacSign.LEO: Element.FIRE,
            ZodiacSign.SAGITTARIUS: Element.FIRE,
            ZodiacSign.TAURUS: Element.EARTH,
            ZodiacSign.VIRGO: Element.EARTH,
            ZodiacSign.CAPRICORN: Element.EARTH,
            ZodiacSign.GEMINI: Element.AIR,
            ZodiacSign.LIBRA: Element.AIR,
            ZodiacSign.AQUARIUS: Element.AIR,
            ZodiacSign.CANCER: Element.WATER,
            ZodiacSign.SCORPIO: Element.WATER,
            ZodiacSign.PISCES: Element.WATER,
        }
        return elements[self]
    
    @property
    def date_range(self) -> str:
        ranges = {
            ZodiacSign.ARIES: "Mar 21 - Apr 19",
            ZodiacSign.TAURUS: "Apr 20 - May 20",
            ZodiacSign.GEMINI: "May 21 - Jun 20",
            ZodiacSign.CANCER: "Jun 21 - Jul 22",
            ZodiacSign.LEO: "Jul 23 - Aug 22",
            ZodiacSign.VIRGO: "Aug 23 - Sep 22",
            ZodiacSign.LIBRA: "Sep 23 - Oct 22",
            ZodiacSign.SCORPIO: "Oct 23 - Nov 21",
            ZodiacSign.SAGITTARIUS: "Nov 22 - Dec 21",
            ZodiacSign.CAPRICORN: "Dec 22 - Jan 19",
            ZodiacSign.AQUARIUS: "Jan 20 - Feb 18",
            ZodiacSign.PISCES: "Feb 19 - Mar 20",
        }
        return ranges[self]
    
    @property
    def paired_sign(self) -> Optional["ZodiacSign"]:
        """Hand-authored pairing that must always appear in best matches."""
        if self is ZodiacSign.LIBRA:
            return ZodiacSign.AQUARIUS
        if self is ZodiacSign.AQUARIUS:
            return ZodiacSign.LIBRA
        return None
    
    def elemental_matches(self) -> List["ZodiacSign"]:
        """Other signs whose element harmonizes with this one, alphabetically."""
        elements = self.element.harmonizes_with
        return sorted(
            (s for s in ZodiacSign if s is not self and s.element in elements),
            key=lambda s: s.value,
        )
    
    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]
    
    @classmethod
    def lunar_order(cls) -> List["ZodiacSign"]:
        """Calendar-year order, starting from Aquarius."""
        signs = list(cls)
        start = signs.index(cls.AQUARIUS)
        return signs[start:] + signs[:start]


class HoroscopeType(str, Enum):
    """Forecast period."""
    
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    
    @property
    def ttl_seconds(self) -> int:
        """Cache TTL for records of this type."""
        if self is HoroscopeType.DAILY:
            return CacheDurations.ONE_DAY
        return CacheDurations.ONE_WEEK
    
    @property
    def timeframe(self) -> str:
        """Wording used in generation prompts."""
        return "today" if self is HoroscopeType.DAILY else f"this {self.value[:-2]}"
    
    @classmethod
    def values(cls) -> List[str]:
        return [t.value for t in cls]
