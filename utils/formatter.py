# utils/formatter.py
from models.result import SingleVerse, VerseRange, WholeChapter, KeywordHits, NotFound

DEFAULT_MAX_BLOCK_SIZE = 4000
DEFAULT_CHAPTER_HEADER = '📖 *{book}* — глава {chapter}'
DEFAULT_NOT_FOUND_TEXT = 'Ничего не найдено.'

# "_" on each side of an italic range body
ITALIC_MARKUP_LENGTH = 2


def _check_block_size(limit):
    if limit < 1:
        raise ValueError(f"max_block_size must be positive, got {limit}")
    return limit


def format_verse(verse: SingleVerse):
    return f'_"{verse.text}"_\n\n{verse.book_name} {verse.chapter}:{verse.verse}'


def format_range(verses: VerseRange, max_block_size=DEFAULT_MAX_BLOCK_SIZE):
    """Numbered, italic verse lines under a reference header, as blocks within the limit.

    The header only opens the first block.
    """
    limit = _check_block_size(max_block_size)
    if limit <= ITALIC_MARKUP_LENGTH:
        raise ValueError(f"max_block_size {limit} cannot hold a verse range")

    first = verses.verses[0][0]
    last = verses.verses[-1][0]
    header = f"📖 *{verses.book_name}* {verses.chapter}:{first}-{last}"
    lines = [f"{number}. {text}" for number, text in verses.verses]

    blocks = [f"_{body}_" for body in _pack(lines, limit - ITALIC_MARKUP_LENGTH)]
    opening = f"{header}\n\n{blocks[0]}"
    if len(opening) <= limit:
        blocks[0] = opening
    else:
        blocks.insert(0, header[:limit])
    return blocks


def format_broadcast(verse: SingleVerse, ending=None):
    """Scheduled-post layout: capitalized verse, reference and an optional closing line."""
    text = verse.text[:1].upper() + verse.text[1:]
    message = f'_"{text}"_\n_{verse.book_name}_ {verse.chapter}:{verse.verse}'
    if ending:
        message += f"\n\n🌿 _{ending}_"
    return message


def _pieces(line, limit):
    if len(line) <= limit:
        return [line]
    return [line[i:i + limit] for i in range(0, len(line), limit)]


def _pack(lines, limit, opening=None):
    """Greedily join lines into blocks of at most ``limit`` characters.

    ``opening`` starts the first block and is followed by a blank line; the
    remaining lines are newline separated. Lines longer than the limit are cut.
    """
    blocks = []
    current = opening
    separator = '\n\n'

    for line in lines:
        for piece in _pieces(line, limit):
            if current is None:
                current = piece
            else:
                candidate = f"{current}{separator}{piece}"
                if len(candidate) > limit:
                    blocks.append(current)
                    current = piece
                else:
                    current = candidate
            separator = '\n'

    if current is not None:
        blocks.append(current)
    return blocks


class ResultFormatter:
    def __init__(self, max_block_size=DEFAULT_MAX_BLOCK_SIZE, chapter_header=DEFAULT_CHAPTER_HEADER,
                 not_found_text=DEFAULT_NOT_FOUND_TEXT):
        self.max_block_size = _check_block_size(max_block_size)
        self.chapter_header = chapter_header
        self.not_found_text = not_found_text

    @classmethod
    def from_config(cls, config):
        return cls(
            max_block_size=config.MAX_BLOCK_SIZE,
            chapter_header=config.CHAPTER_HEADER,
            not_found_text=config.NOT_FOUND_TEXT,
        )

    def _block_size(self, max_block_size):
        return _check_block_size(self.max_block_size if max_block_size is None else max_block_size)

    def header(self, book_name, chapter):
        return self.chapter_header.format(book=book_name, chapter=chapter)

    def format_for_display(self, result, max_block_size=None):
        """Render any retrieval result as an ordered list of text blocks."""
        limit = self._block_size(max_block_size)
        if isinstance(result, SingleVerse):
            return [format_verse(result)]
        if isinstance(result, VerseRange):
            return format_range(result, limit)
        if isinstance(result, WholeChapter):
            return self.split_chapter(result, limit)
        if isinstance(result, KeywordHits):
            return [format_verse(hit) for hit in result.hits]
        if isinstance(result, NotFound):
            return [self.not_found_text]
        raise TypeError(f"Cannot format {type(result).__name__}")

    def split_chapter(self, chapter: WholeChapter, max_block_size=None):
        """Header plus numbered verse lines, packed into blocks no longer than the limit.

        Continuation blocks carry no header.
        """
        limit = self._block_size(max_block_size)
        lines = [f"{number}. {text}" for number, text in enumerate(chapter.verses, start=1)]
        return _pack(lines, limit, opening=self.header(chapter.book_name, chapter.chapter)[:limit])

    def chapter_page(self, chapter: WholeChapter, page, max_block_size=None):
        """Block ``page`` (0-based) of a chapter and the total block count, or (None, count)."""
        blocks = self.split_chapter(chapter, max_block_size)
        if not 0 <= page < len(blocks):
            return None, len(blocks)
        return blocks[page], len(blocks)

    def inline_results(self, hits):
        """Instant-answer entries: a title, a short description and the full message."""
        return [
            {
                "id": str(index),
                "title": hit.reference,
                "description": hit.text[:100],
                "message_text": format_verse(hit),
            }
            for index, hit in enumerate(hits)
        ]
