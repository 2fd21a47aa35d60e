# utils/search.py
import logging
import random
import re

from models.corpus import Corpus
from models.query import Reference, FreeText
from models.result import SingleVerse, VerseRange, WholeChapter, KeywordHits, NotFound
from utils.errors import (
    ScriptureError,
    BookNotFound,
    ChapterOutOfRange,
    VerseOutOfRange,
    EmptyResultSet,
    EmptyCorpusError,
)
from utils.parser import parse_query
from utils.resolver import BookResolver, DEFAULT_MAX_DISTANCE

logger = logging.getLogger(__name__)

# Free-text modes
MODE_ALL = 'all'        # every keyword must appear
MODE_PHRASE = 'phrase'  # the whole query must appear
SEARCH_MODES = (MODE_ALL, MODE_PHRASE)

SHORT_VERSE_LENGTH = 80
TERMINAL_PUNCTUATION = re.compile(r'[.!?…]$')


class BibleSearchEngine:
    def __init__(self, corpus: Corpus, fuzzy=True, max_distance=DEFAULT_MAX_DISTANCE,
                 allow_ranges=True, free_text_mode=MODE_PHRASE, rng=None):
        if free_text_mode not in SEARCH_MODES:
            raise ValueError(f"Unknown free text mode: {free_text_mode}")
        self.corpus = corpus
        self.resolver = BookResolver(corpus, fuzzy=fuzzy, max_distance=max_distance)
        self.allow_ranges = allow_ranges
        self.free_text_mode = free_text_mode
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, corpus, config, rng=None):
        return cls(
            corpus,
            fuzzy=config.FUZZY_MATCHING,
            max_distance=config.FUZZY_MAX_DISTANCE,
            allow_ranges=config.VERSE_RANGES,
            free_text_mode=config.FREE_TEXT_MODE,
            rng=rng,
        )

    # -- queries ---------------------------------------------------------

    def resolve_query(self, raw, limit=5, mode=None):
        """Parse, resolve and look up one raw query string."""
        parsed = parse_query(raw, allow_ranges=self.allow_ranges)
        if isinstance(parsed, Reference):
            return self.lookup(parsed)
        return self.search_parsed(parsed, limit=limit, mode=mode or self.free_text_mode)

    def lookup(self, reference: Reference):
        try:
            return self._lookup(reference)
        except ScriptureError as e:
            logger.info(f"Reference lookup failed: {e}")
            return NotFound(reason=str(e))

    def _lookup(self, reference: Reference):
        book = self.resolver.resolve(reference.book_name_raw)
        if book is None:
            raise BookNotFound(reference.book_name_raw)

        if not 1 <= reference.chapter <= book.chapter_count:
            raise ChapterOutOfRange(book.name, reference.chapter)
        verses = book.chapters[reference.chapter - 1]

        if reference.verse is None:
            return WholeChapter(book_name=book.name, chapter=reference.chapter, verses=verses)

        if reference.verse_end is None:
            if not 1 <= reference.verse <= len(verses):
                raise VerseOutOfRange(book.name, reference.chapter, reference.verse)
            return SingleVerse(
                book_name=book.name,
                chapter=reference.chapter,
                verse=reference.verse,
                text=verses[reference.verse - 1],
            )

        start = max(reference.verse, 1)
        end = min(reference.verse_end, len(verses))
        if start > end:
            raise VerseOutOfRange(book.name, reference.chapter, reference.verse)
        return VerseRange(
            book_name=book.name,
            chapter=reference.chapter,
            verses=tuple((number, verses[number - 1]) for number in range(start, end + 1)),
        )

    def search(self, query, limit=10, mode=MODE_ALL):
        """Free-text search over the whole corpus, first ``limit`` hits in corpus order."""
        phrase = (query or '').strip().lower()
        return self.search_parsed(FreeText(keywords=tuple(phrase.split()), phrase=phrase), limit, mode)

    def search_parsed(self, free_text: FreeText, limit, mode):
        try:
            return KeywordHits(hits=tuple(self._scan(free_text, limit, mode)))
        except EmptyResultSet as e:
            logger.info(f"Search found nothing: {e}")
            return NotFound(reason=str(e))

    def _scan(self, free_text, limit, mode):
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode: {mode}")
        if limit < 1 or not free_text.keywords:
            raise EmptyResultSet(free_text.phrase)

        if mode == MODE_ALL:
            keywords = [word.lower() for word in free_text.keywords]

            def matches(text):
                return all(word in text for word in keywords)
        else:
            phrase = free_text.phrase.lower()

            def matches(text):
                return phrase in text

        results = []
        for book in self.corpus:
            for chapter_number, chapter in enumerate(book.chapters, start=1):
                for verse_number, text in enumerate(chapter, start=1):
                    if matches(text.lower()):
                        results.append(SingleVerse(book.name, chapter_number, verse_number, text))
                        if len(results) >= limit:
                            return results
        if not results:
            raise EmptyResultSet(free_text.phrase)
        return results

    # -- random picks ----------------------------------------------------

    def _sample_position(self):
        books = [book for book in self.corpus if book.has_verses()]
        if not books:
            raise EmptyCorpusError("Corpus has no verses to choose from")
        book = self.rng.choice(books)
        chapter_index = self.rng.choice([i for i, chapter in enumerate(book.chapters) if chapter])
        verse_index = self.rng.randrange(len(book.chapters[chapter_index]))
        return book, chapter_index, verse_index

    def random_verse(self):
        book, chapter_index, verse_index = self._sample_position()
        return SingleVerse(
            book_name=book.name,
            chapter=chapter_index + 1,
            verse=verse_index + 1,
            text=book.chapters[chapter_index][verse_index],
        )

    def random_broadcast_unit(self):
        """Random verse, joined with the next one when it is a short sentence fragment."""
        book, chapter_index, verse_index = self._sample_position()
        chapter = book.chapters[chapter_index]
        text = chapter[verse_index]

        if (len(text) < SHORT_VERSE_LENGTH
                and not TERMINAL_PUNCTUATION.search(text.strip())
                and verse_index + 1 < len(chapter)):
            verse_index += 1
            text = f"{text} {chapter[verse_index]}"

        return SingleVerse(
            book_name=book.name,
            chapter=chapter_index + 1,
            verse=verse_index + 1,
            text=text,
        )

    # -- listings --------------------------------------------------------

    def list_books(self, testament=None):
        books = self.corpus.books if testament is None else self.corpus.testament(testament)
        return [book.name for book in books]

    def list_chapters(self, book_name):
        book = self.corpus.get(book_name)
        if book is None:
            return None
        return list(range(1, book.chapter_count + 1))

    def chapter(self, book_name, chapter):
        """Whole chapter by canonical book name, as used by page navigation."""
        book = self.corpus.get(book_name)
        if book is None or not 1 <= chapter <= book.chapter_count:
            return NotFound(reason=f"{book_name} {chapter}")
        return WholeChapter(book_name=book.name, chapter=chapter, verses=book.chapters[chapter - 1])

    def verse(self, book_name, chapter, verse):
        result = self.chapter(book_name, chapter)
        if isinstance(result, NotFound) or not 1 <= verse <= len(result.verses):
            return NotFound(reason=f"{book_name} {chapter}:{verse}")
        return SingleVerse(result.book_name, chapter, verse, result.verses[verse - 1])

    def navigation(self, book_name, chapter):
        """Neighbouring chapters of a chapter, and the following book at the end of a book."""
        book = self.corpus.get(book_name)
        if book is None:
            return None
        next_book = self.corpus.next_book(book) if chapter >= book.chapter_count else None
        return {
            "previous_chapter": chapter - 1 if chapter > 1 else None,
            "next_chapter": chapter + 1 if chapter < book.chapter_count else None,
            "next_book": next_book.name if next_book else None,
        }
