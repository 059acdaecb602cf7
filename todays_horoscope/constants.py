"""
Shared constants: cache durations and the quote author allow-list.
"""

from typing import Dict, Tuple


class CacheDurations:
    """Cache TTLs in seconds."""
    
    ONE_HOUR = 60 * 60
    ONE_DAY = 60 * 60 * 24
    ONE_WEEK = 60 * 60 * 24 * 7


# Canonical author name -> accepted spellings (matched case-insensitively as substrings)
QUOTE_AUTHOR_ALIASES: Dict[str, Tuple[str, ...]] = {
    "Allan Watts": ("Allan Watts", "Alan Watts"),
    "Richard Feynman": ("Richard Feynman",),
    "Albert Einstein": ("Albert Einstein",),
    "Friedrich Nietzsche": ("Friedrich Nietzsche",),
    "Lao Tzu": ("Lao Tzu",),
    "Socrates": ("Socrates",),
    "Plato": ("Plato",),
    "Aristotle": ("Aristotle",),
    "Epicurus": ("Epicurus",),
    "Marcus Aurelius": ("Marcus Aurelius",),
    "Seneca": ("Seneca",),
    "Jiddu Krishnamurti": ("Jiddu Krishnamurti",),
    "Dr. Joe Dispenza": ("Dr. Joe Dispenza", "Joe Dispenza"),
    "Walter Russell": ("Walter Russell",),
}

QUOTE_AUTHORS: Tuple[str, ...] = tuple(QUOTE_AUTHOR_ALIASES)

# Per-batch reuse cap for a single quote author
MAX_AUTHOR_USES_PER_BATCH = 2

# Extra generation attempts when a batch result breaks the cap
MAX_ATTRIBUTION_RETRIES = 3
