from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Reference:
    book_name_raw: str
    chapter: int
    verse: Optional[int] = None
    verse_end: Optional[int] = None


@dataclass(frozen=True)
class FreeText:
    keywords: Tuple[str, ...]
    # whole lower-cased input, used by phrase search
    phrase: str
