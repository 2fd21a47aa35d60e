# utils/resolver.py
import logging
from typing import Optional

from rapidfuzz.distance import Levenshtein

from models.corpus import Book, Corpus

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE = 5


def normalize_book_name(name):
    """Lower-case and drop all whitespace: 'От  Иоанна' -> 'отиоанна'"""
    if not name:
        return ''
    return ''.join(str(name).lower().split())


class BookResolver:
    """Match a user supplied book name to a canonical book.

    Exact normalized match first, then substring of a canonical name, then the
    closest name by Levenshtein distance if fuzzy matching is enabled and the
    distance is within ``max_distance``. Every stage prefers the earliest book.
    """

    def __init__(self, corpus: Corpus, fuzzy=True, max_distance=DEFAULT_MAX_DISTANCE):
        self.corpus = corpus
        self.fuzzy = fuzzy
        self.max_distance = max_distance
        self._normalized = [(normalize_book_name(book.name), book) for book in corpus]

    def resolve(self, raw_name) -> Optional[Book]:
        wanted = normalize_book_name(raw_name)
        if not wanted:
            return None

        for normalized, book in self._normalized:
            if normalized == wanted:
                return book

        for normalized, book in self._normalized:
            if wanted in normalized:
                return book

        if not self.fuzzy:
            return None
        return self.closest(wanted)

    def closest(self, wanted) -> Optional[Book]:
        best_book = None
        best_distance = None
        for normalized, book in self._normalized:
            distance = Levenshtein.distance(wanted, normalized)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_book = book

        if best_book is not None and best_distance <= self.max_distance:
            logger.debug(f"Fuzzy matched '{wanted}' to '{best_book.name}' (distance {best_distance})")
            return best_book
        return None
