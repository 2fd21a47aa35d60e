from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SingleVerse:
    book_name: str
    chapter: int
    verse: int
    text: str

    @property
    def reference(self):
        return f"{self.book_name} {self.chapter}:{self.verse}"

    def to_json(self):
        return {
            "book": self.book_name,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
        }


@dataclass(frozen=True)
class VerseRange:
    book_name: str
    chapter: int
    verses: Tuple[Tuple[int, str], ...]


@dataclass(frozen=True)
class WholeChapter:
    book_name: str
    chapter: int
    verses: Tuple[str, ...]


@dataclass(frozen=True)
class KeywordHits:
    hits: Tuple[SingleVerse, ...]


@dataclass(frozen=True)
class NotFound:
    reason: str = ''
