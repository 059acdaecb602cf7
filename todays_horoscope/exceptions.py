"""
Error taxonomy for horoscope serving.

InvalidInput and GenerationFailed travel up to the HTTP layer.
CacheUnavailable never leaves the cache store. AttributionConstraintUnmet is
recorded on batch results and never raised.
"""

from typing import Optional


class HoroscopeError(Exception):
    """Base class for all horoscope errors."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(HoroscopeError):
    """Malformed sign or type from the caller. Never retried."""


class GenerationFailed(HoroscopeError):
    """Upstream generation returned an unparseable or incomplete response."""
    
    def __init__(self, message: str, sign: Optional[str] = None):
        super().__init__(message)
        self.sign = sign


class CacheUnavailable(HoroscopeError):
    """A cache store read or write failed."""


class AttributionConstraintUnmet(HoroscopeError):
    """A batch kept a record whose quote author is over the reuse cap."""
    
    def __init__(self, sign: str, author: str, uses: int):
        super().__init__(
            f"{author} used {uses} times in batch; kept for {sign} after retries"
        )
        self.sign = sign
        self.author = author
        self.uses = uses
