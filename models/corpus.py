import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from utils.errors import CorpusLoadError

logger = logging.getLogger(__name__)

OLD_TESTAMENT = 'old'
NEW_TESTAMENT = 'new'


@dataclass(frozen=True)
class Book:
    name: str
    position: int
    chapters: Tuple[Tuple[str, ...], ...]

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)

    def has_verses(self) -> bool:
        return any(self.chapters)


@dataclass(frozen=True)
class Corpus:
    """Ordered, read-only collection of books.

    ``testament_start`` is the index of the first book of the new testament;
    when it equals ``len(books)`` the new testament is empty.
    """

    books: Tuple[Book, ...]
    testament_start: int = field(default=0)

    def __post_init__(self):
        if not 0 <= self.testament_start <= len(self.books):
            raise ValueError(f"testament_start {self.testament_start} is outside the corpus")

    def __len__(self):
        return len(self.books)

    def __iter__(self):
        return iter(self.books)

    def get(self, name: str) -> Optional[Book]:
        """Exact lookup by canonical display name."""
        for book in self.books:
            if book.name == name:
                return book
        return None

    def testament(self, which: str) -> Tuple[Book, ...]:
        if which == OLD_TESTAMENT:
            return self.books[:self.testament_start]
        if which == NEW_TESTAMENT:
            return self.books[self.testament_start:]
        raise ValueError(f"Unknown testament: {which}")

    def next_book(self, book: Book) -> Optional[Book]:
        if book.position + 1 < len(self.books):
            return self.books[book.position + 1]
        return None


def _normalize(name):
    return ''.join(name.lower().split())


def find_testament_start(books, boundary: Union[str, int, None]) -> int:
    """Index of the first new-testament book.

    ``boundary`` is either a canonical book name (case and spacing ignored) or
    a 1-based book id. An unknown boundary puts every book in the old testament.
    """
    if boundary is None or boundary == '':
        return len(books)

    if isinstance(boundary, int) or str(boundary).strip().isdigit():
        book_id = int(boundary)
        if 1 <= book_id <= len(books):
            return book_id - 1
        logger.warning(f"Testament boundary id {book_id} is outside 1..{len(books)}")
        return len(books)

    wanted = _normalize(str(boundary))
    for index, book in enumerate(books):
        if _normalize(book.name) == wanted:
            return index
    logger.warning(f"Testament boundary book '{boundary}' not found; all books are old testament")
    return len(books)


def build_corpus(raw, testament_boundary=None) -> Corpus:
    """Convert the nested ``[{"name": ..., "chapters": [[verse, ...], ...]}]`` shape."""
    if not isinstance(raw, list):
        raise CorpusLoadError("Corpus root must be a list of books")

    books: List[Book] = []
    seen = set()
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise CorpusLoadError(f"Book #{position + 1} is not an object")
        name = entry.get('name', entry.get('book'))
        if not isinstance(name, str) or not name.strip():
            raise CorpusLoadError(f"Book #{position + 1} has no name")
        if name in seen:
            raise CorpusLoadError(f"Duplicate book name '{name}'")
        seen.add(name)

        chapters = entry.get('chapters')
        if not isinstance(chapters, list):
            raise CorpusLoadError(f"Book '{name}' has no chapter list")
        converted = []
        for number, chapter in enumerate(chapters, start=1):
            if not isinstance(chapter, list) or not all(isinstance(v, str) for v in chapter):
                raise CorpusLoadError(f"{name} {number} is not a list of verse strings")
            converted.append(tuple(chapter))
        books.append(Book(name=name, position=position, chapters=tuple(converted)))

    return Corpus(books=tuple(books), testament_start=find_testament_start(books, testament_boundary))


def load_corpus(path, testament_boundary=None) -> Corpus:
    """Read the corpus JSON file. Any failure is a ``CorpusLoadError``."""
    path = Path(path)
    logger.info(f"Loading corpus from {path}")
    try:
        # utf-8-sig drops a leading byte-order mark if the file has one
        with open(path, 'r', encoding='utf-8-sig') as f:
            raw = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorpusLoadError(f"Could not read corpus {path}: {e}") from e

    corpus = build_corpus(raw, testament_boundary)
    verse_count = sum(len(chapter) for book in corpus for chapter in book.chapters)
    logger.info(
        f"Loaded {len(corpus)} books, {verse_count} verses "
        f"({corpus.testament_start} old testament books)"
    )
    return corpus
