"""
Room identifier generation.

Turns a human display name into a URL-safe slug, and disambiguates slugs that
are already taken with a random numeric suffix.
"""

import random
import re
import unicodedata
from typing import Optional

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]+')

DEFAULT_MAX_LENGTH = 50
DEFAULT_SUFFIX_DIGITS = 4


def format_string_to_room_id(value: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Normalize a display name into a room id slug.

    Accents are folded to ASCII, the result is lower-cased, and every run of
    characters outside [a-z0-9] becomes a single hyphen. Leading and trailing
    hyphens are dropped.

        >>> format_string_to_room_id("Sprint 12")
        'sprint-12'
        >>> format_string_to_room_id("  Équipe / Backlog!! ")
        'equipe-backlog'

    Returns an empty string when nothing usable is left.
    """
    if not value:
        return ''

    folded = unicodedata.normalize('NFKD', value).encode('ascii', 'ignore').decode('ascii')
    slug = _NON_ALPHANUMERIC.sub('-', folded.lower()).strip('-')

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip('-')

    return slug


def random_suffix(digits: int = DEFAULT_SUFFIX_DIGITS, rng: Optional[random.Random] = None) -> str:
    """Random number with exactly `digits` digits, as a string."""
    rng = rng or random
    low = 10 ** (digits - 1)
    high = 10 ** digits - 1
    return str(rng.randint(low, high))


def append_random_suffix(room_id: str, digits: int = DEFAULT_SUFFIX_DIGITS,
                         rng: Optional[random.Random] = None) -> str:
    """Append '-NNNN' to a room id."""
    return f"{room_id}-{random_suffix(digits, rng)}"
