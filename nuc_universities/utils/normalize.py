"""Field derivation from raw university names."""

from __future__ import annotations

import re
import string
from typing import NamedTuple

from nuc_universities.data.models import RawRow, University, UniversityType

STOP_WORDS = frozenset({"of", "the", "and", "for"})
MAX_ABBREVIATION_LENGTH = 6

_PUNCTUATION_RE = re.compile(r"[(),.]")
_WHITESPACE_RE = re.compile(r"\s+")
_STATE_SUFFIX_RE = re.compile(r" State$", re.IGNORECASE)


class Location(NamedTuple):
    """City and state parsed out of a university name."""

    city: str
    state: str


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim the ends.

    Examples:
        >>> collapse_whitespace("  University   of\\n Lagos ")
        'University of Lagos'
    """
    return _WHITESPACE_RE.sub(" ", text).strip()


def derive_abbreviation(name: str) -> str:
    """Build a naive abbreviation from the significant words of *name*.

    Rules:
        - Remove parentheses, commas and periods
        - Split on whitespace
        - Drop the stop-words "of", "the", "and", "for" (any case)
        - Take the first letter of each remaining word
        - Uppercase and truncate to six characters

    Words that do not start with an ASCII letter (e.g. "&", "-", "2nd")
    contribute nothing.

    Examples:
        >>> derive_abbreviation("University of Lagos, Akoka, Lagos State")
        'ULALS'
        >>> derive_abbreviation("University of Lagos")
        'UL'
        >>> derive_abbreviation("of the")
        ''
    """
    words = _PUNCTUATION_RE.sub("", name).split()
    letters = "".join(
        word[0]
        for word in words
        if word.lower() not in STOP_WORDS and word[0] in string.ascii_letters
    )
    return letters.upper()[:MAX_ABBREVIATION_LENGTH]


def _strip_state_suffix(segment: str) -> str:
    return _STATE_SUFFIX_RE.sub("", segment).strip()


def derive_location(name: str) -> Location:
    """Extract city and state from a ``Name, City[, State]`` string.

    - Three or more segments: city is the second, state the third with a
      trailing " State" removed.
    - Exactly two segments: city and state are both the second segment
      (with the suffix removed). The listings rarely separate the two.
    - Otherwise both are empty.

    Examples:
        >>> derive_location("University of Lagos, Akoka, Lagos State")
        Location(city='Akoka', state='Lagos')
        >>> derive_location("Federal University, Oye-Ekiti")
        Location(city='Oye-Ekiti', state='Oye-Ekiti')
    """
    parts = [part.strip() for part in name.split(",")]
    if len(parts) >= 3:
        return Location(city=parts[1], state=_strip_state_suffix(parts[2]))
    if len(parts) == 2:
        place = _strip_state_suffix(parts[1])
        return Location(city=place, state=place)
    return Location(city="", state="")


def normalize_row(row: RawRow, university_type: UniversityType) -> University:
    """Build a :class:`University` from an extracted row.

    The name is derived into abbreviation, city and state; everything
    else is carried through. *university_type* comes from the source
    configuration, never from the row itself.
    """
    name = collapse_whitespace(row.name)
    location = derive_location(name)
    return University(
        name=name,
        state=location.state,
        city=location.city,
        abbreviation=derive_abbreviation(name),
        vice_chancellor=collapse_whitespace(row.vice_chancellor),
        year_of_establishment=row.year_of_establishment.strip(),
        website=row.website.strip(),
        university_type=university_type,
    )
