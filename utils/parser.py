# utils/parser.py
import re

from models.query import Reference, FreeText

# A name word: letters, optionally hyphen-joined ("1-е"). Letters are word
# characters minus digits and underscore.
_WORD = r'[^\W\d_]+(?:-[^\W\d_]+)*'
_BOOK = rf'\d?[\s-]*{_WORD}(?:\s+{_WORD})*'

# "[digit] name words  chapter[:verse[-verse_end]]"
REFERENCE_PATTERN = re.compile(
    rf'^({_BOOK})\s+(\d+)(?::(\d+)(?:-(\d+))?)?$',
    re.IGNORECASE,
)

# Same shape without the range suffix, for deployments that disable ranges
REFERENCE_PATTERN_NO_RANGE = re.compile(
    rf'^({_BOOK})\s+(\d+)(?::(\d+))?$',
    re.IGNORECASE,
)


def _optional_int(group):
    return int(group) if group else None


def parse_query(raw, allow_ranges=True):
    """Classify raw input as a ``Reference`` or ``FreeText``.

    Anything that is not a complete reference is free text, so this never fails.
    """
    text = (raw or '').strip()
    pattern = REFERENCE_PATTERN if allow_ranges else REFERENCE_PATTERN_NO_RANGE
    match = pattern.match(text)
    if match:
        groups = match.groups()
        return Reference(
            book_name_raw=groups[0],
            chapter=int(groups[1]),
            verse=_optional_int(groups[2]),
            verse_end=_optional_int(groups[3]) if len(groups) > 3 else None,
        )

    phrase = text.lower()
    return FreeText(keywords=tuple(phrase.split()), phrase=phrase)
