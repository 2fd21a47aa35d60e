# utils/errors.py


class ScriptureError(Exception):
    """Base class for every error raised by the query engine."""


class ParseAmbiguous(ScriptureError):
    """Input is neither a reference nor usable free text.

    Free text is a total fallback, so the parser never raises this.
    """


class BookNotFound(ScriptureError):
    def __init__(self, name):
        super().__init__(f"No book matches '{name}'")
        self.name = name


class ChapterOutOfRange(ScriptureError):
    def __init__(self, book, chapter):
        super().__init__(f"{book} has no chapter {chapter}")
        self.book = book
        self.chapter = chapter


class VerseOutOfRange(ScriptureError):
    def __init__(self, book, chapter, verse):
        super().__init__(f"{book} {chapter} has no verse {verse}")
        self.book = book
        self.chapter = chapter
        self.verse = verse


class EmptyResultSet(ScriptureError):
    def __init__(self, query):
        super().__init__(f"No verses match '{query}'")
        self.query = query


class EmptyCorpusError(ScriptureError):
    """Random selection was asked of a corpus without a single verse."""


class CorpusLoadError(ScriptureError):
    """The corpus source could not be turned into books, chapters and verses."""
