"""Tests for the retrieval engine."""

import random

import pytest

from conftest import RAW_CORPUS, FirstChoice
from models.corpus import build_corpus
from models.result import SingleVerse, VerseRange, WholeChapter, KeywordHits, NotFound
from utils.errors import EmptyCorpusError
from utils.search import BibleSearchEngine, MODE_ALL, MODE_PHRASE


def refs(result):
    return [hit.reference for hit in result.hits]


def test_every_book_resolves_to_its_first_chapter(engine, corpus):
    for book in corpus:
        if not book.chapters:
            continue
        result = engine.resolve_query(f"{book.name} 1")
        assert result == WholeChapter(book.name, 1, book.chapters[0])


def test_every_verse_is_addressable(engine, corpus):
    for book in corpus:
        for chapter_number, chapter in enumerate(book.chapters, start=1):
            for verse_number, text in enumerate(chapter, start=1):
                result = engine.resolve_query(f"{book.name} {chapter_number}:{verse_number}")
                assert result == SingleVerse(book.name, chapter_number, verse_number, text)


def test_verse_range_is_inclusive_and_ordered(engine):
    result = engine.resolve_query("Бытие 1:2-4")

    assert isinstance(result, VerseRange)
    assert [number for number, _ in result.verses] == [2, 3, 4]
    assert result.verses[0][1] == RAW_CORPUS[0]["chapters"][0][1]


def test_verse_range_is_clamped_to_the_chapter(engine):
    assert [n for n, _ in engine.resolve_query("Бытие 1:4-10").verses] == [4, 5]
    assert [n for n, _ in engine.resolve_query("Бытие 1:0-2").verses] == [1, 2]


@pytest.mark.parametrize(
    "query",
    ["Бытие 0", "Бытие 3", "Бытие 1:0", "Бытие 1:6", "Бытие 1:4-2", "Бытие 1:7-9", "Откровение 1", "Бытие -1"],
)
def test_out_of_range_positions_are_not_found(engine, query):
    assert isinstance(engine.resolve_query(query), NotFound)


def test_empty_chapter(engine):
    assert engine.resolve_query("От Матфея 2") == WholeChapter("От Матфея", 2, ())
    assert isinstance(engine.resolve_query("От Матфея 2:1"), NotFound)


def test_misspelled_book(engine):
    result = engine.resolve_query("Бытте 1:1")

    assert isinstance(result, SingleVerse)
    assert result.book_name == "Бытие"


def test_unknown_book(engine):
    result = engine.resolve_query("щщщщщщщщщщщщщщщщ 1")

    assert isinstance(result, NotFound)
    assert "щщщ" in result.reason


def test_fuzzy_matching_flag(corpus):
    strict = BibleSearchEngine(corpus, fuzzy=False)

    assert isinstance(strict.resolve_query("Бытте 1"), NotFound)
    assert isinstance(strict.resolve_query("быт 1"), WholeChapter)


def test_all_keywords_must_appear(engine):
    result = engine.search("СВЕТ тьм", limit=10, mode=MODE_ALL)

    assert refs(result) == ["Бытие 1:4", "Бытие 1:5", "От Иоанна 1:5"]
    # 1:2 has "тьма" but no "свет"
    assert "Бытие 1:2" not in refs(result)


def test_keyword_order_does_not_matter(engine):
    assert refs(engine.search("тьма свет", mode=MODE_ALL)) == ["От Иоанна 1:5"]


def test_phrase_mode_matches_whole_phrase(engine):
    assert refs(engine.search("свет от тьмы", mode=MODE_PHRASE)) == ["Бытие 1:4"]
    assert isinstance(engine.search("тьма свет", mode=MODE_PHRASE), NotFound)


def test_search_respects_limit_in_corpus_order(engine):
    result = engine.search("бог", limit=2, mode=MODE_ALL)

    assert refs(result) == ["Бытие 1:1", "Бытие 1:3"]


def test_free_text_query_uses_configured_mode(corpus):
    phrase_engine = BibleSearchEngine(corpus, free_text_mode=MODE_PHRASE)
    all_engine = BibleSearchEngine(corpus, free_text_mode=MODE_ALL)

    assert isinstance(phrase_engine.resolve_query("тьма свет"), NotFound)
    assert refs(all_engine.resolve_query("тьма свет")) == ["От Иоанна 1:5"]
    assert isinstance(phrase_engine.resolve_query("тьма свет", mode=MODE_ALL), KeywordHits)


def test_resolve_query_caps_hits(engine):
    result = engine.resolve_query("бог", limit=3)

    assert len(result.hits) == 3


@pytest.mark.parametrize("query", ["", "   ", "несуществующее"])
def test_search_without_hits_is_not_found(engine, query):
    assert isinstance(engine.search(query), NotFound)


def test_unknown_search_mode(engine):
    with pytest.raises(ValueError):
        engine.search("бог", mode="fuzzy")


def test_resolve_query_is_pure(engine):
    for query in ["Бытие 1", "Бытие 1:2-3", "свет", "Бытте 2:1", "щщщщщщщщщщщщщщщ 1"]:
        assert engine.resolve_query(query) == engine.resolve_query(query)


def test_random_verse_exists(corpus):
    engine = BibleSearchEngine(corpus, rng=random.Random(7))

    for _ in range(200):
        verse = engine.random_verse()
        book = corpus.get(verse.book_name)
        assert book.chapters[verse.chapter - 1][verse.verse - 1] == verse.text


@pytest.mark.parametrize(
    "raw",
    [
        [],
        [{"name": "Пусто", "chapters": []}],
        [{"name": "Пусто", "chapters": [[], []]}],
    ],
)
def test_random_verse_on_empty_corpus(raw):
    engine = BibleSearchEngine(build_corpus(raw))

    with pytest.raises(EmptyCorpusError):
        engine.random_verse()
    with pytest.raises(EmptyCorpusError):
        engine.random_broadcast_unit()


def single_chapter_engine(verses):
    corpus = build_corpus([{"name": "Книга", "chapters": [verses]}])
    return BibleSearchEngine(corpus, rng=FirstChoice())


def test_broadcast_unit_completes_short_fragment():
    engine = single_chapter_engine(["Так совершены небо и земля", "и все воинство их."])

    unit = engine.random_broadcast_unit()

    assert unit == SingleVerse("Книга", 1, 2, "Так совершены небо и земля и все воинство их.")


@pytest.mark.parametrize(
    "first",
    [
        "Так совершены небо и земля.",
        "Так совершены небо и земля…",
        "Так совершены небо и земля! ",
        "Долгий стих " + "слово " * 20,
    ],
)
def test_broadcast_unit_keeps_complete_or_long_verses(first):
    engine = single_chapter_engine([first, "и все воинство их."])

    unit = engine.random_broadcast_unit()

    assert unit == SingleVerse("Книга", 1, 1, first)


def test_broadcast_unit_at_end_of_chapter():
    engine = single_chapter_engine(["и все воинство их"])

    assert engine.random_broadcast_unit() == SingleVerse("Книга", 1, 1, "и все воинство их")


def test_random_pick_skips_empty_books_and_chapters():
    corpus = build_corpus([
        {"name": "Пусто", "chapters": []},
        {"name": "Книга", "chapters": [[], ["Единственный стих."]]},
    ])
    engine = BibleSearchEngine(corpus, rng=FirstChoice())

    assert engine.random_verse() == SingleVerse("Книга", 2, 1, "Единственный стих.")


def test_list_books(engine):
    assert engine.list_books() == ["Бытие", "Исход", "От Матфея", "От Иоанна", "1-е Иоанна", "Откровение"]
    assert engine.list_books("old") == ["Бытие", "Исход"]
    assert engine.list_books("new") == ["От Матфея", "От Иоанна", "1-е Иоанна", "Откровение"]


def test_list_chapters(engine):
    assert engine.list_chapters("Бытие") == [1, 2]
    assert engine.list_chapters("Откровение") == []
    assert engine.list_chapters("Неизвестная") is None


def test_navigation(engine):
    assert engine.navigation("Бытие", 1) == {"previous_chapter": None, "next_chapter": 2, "next_book": None}
    assert engine.navigation("Бытие", 2) == {"previous_chapter": 1, "next_chapter": None, "next_book": "Исход"}
    assert engine.navigation("Откровение", 0)["next_book"] is None
    assert engine.navigation("Неизвестная", 1) is None


def test_direct_lookups(engine):
    assert engine.verse("Исход", 1, 1).text.startswith("Вот имена")
    assert isinstance(engine.verse("Исход", 1, 2), NotFound)
    assert isinstance(engine.chapter("Исход", 2), NotFound)


def test_unknown_free_text_mode(corpus):
    with pytest.raises(ValueError):
        BibleSearchEngine(corpus, free_text_mode="fuzzy")
