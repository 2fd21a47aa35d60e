# This file makes the models directory a Python package
from .corpus import Book, Corpus, load_corpus, build_corpus, OLD_TESTAMENT, NEW_TESTAMENT
from .query import Reference, FreeText
from .result import SingleVerse, VerseRange, WholeChapter, KeywordHits, NotFound
from .subscriber import Subscriber

__all__ = [
    'Book',
    'Corpus',
    'load_corpus',
    'build_corpus',
    'OLD_TESTAMENT',
    'NEW_TESTAMENT',
    'Reference',
    'FreeText',
    'SingleVerse',
    'VerseRange',
    'WholeChapter',
    'KeywordHits',
    'NotFound',
    'Subscriber',
]
