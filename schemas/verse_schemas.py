from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class VerseRead(BaseModel):
    book: str
    chapter: int
    verse: int
    text: str


class QueryResponse(BaseModel):
    kind: Literal['single_verse', 'verse_range', 'whole_chapter', 'keyword_hits', 'not_found']
    blocks: List[str]
    verses: List[VerseRead] = Field(default_factory=list)


class ChapterPage(BaseModel):
    book: str
    chapter: int
    page: int
    total_pages: int
    content: str
    previous_chapter: Optional[int] = None
    next_chapter: Optional[int] = None
    next_book: Optional[str] = None
