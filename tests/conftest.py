"""Shared fixtures: a small corpus, the engine over it and a throwaway database."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import Config
from database import make_engine, make_session_factory, init_db
from models.corpus import build_corpus
from utils.formatter import ResultFormatter
from utils.search import BibleSearchEngine
from utils.subscribers import SubscriberStore

RAW_CORPUS = [
    {
        "name": "Бытие",
        "chapters": [
            [
                "В начале сотворил Бог небо и землю.",
                "Земля же была безвидна и пуста, и тьма над бездною.",
                "И сказал Бог: да будет свет. И стал свет.",
                "И увидел Бог свет, что он хорош, и отделил Бог свет от тьмы.",
                "И назвал Бог свет днем, а тьму ночью",
            ],
            [
                "Так совершены небо и земля",
                "и все воинство их.",
            ],
        ],
    },
    {
        "name": "Исход",
        "chapters": [["Вот имена сынов Израилевых, которые вошли в Египет."]],
    },
    {
        "name": "От Матфея",
        "chapters": [
            ["Родословие Иисуса Христа, Сына Давидова.", "Авраам родил Исаака."],
            [],
        ],
    },
    {
        "name": "От Иоанна",
        "chapters": [
            [
                "В начале было Слово.",
                "Оно было в начале у Бога.",
                "Все чрез Него начало быть.",
                "В Нем была жизнь, и жизнь была свет человеков.",
                "И свет во тьме светит, и тьма не объяла его.",
            ],
            ["На третий день был брак в Кане Галилейской."],
        ],
    },
    {
        "name": "1-е Иоанна",
        "chapters": [["О том, что было от начала.", "Ибо жизнь явилась."]],
    },
    {
        "name": "Откровение",
        "chapters": [],
    },
]


class FirstChoice:
    """Deterministic stand-in for random.Random: always the first option."""

    def choice(self, seq):
        return seq[0]

    def randrange(self, stop):
        return 0


class RecordingSender:
    """Collects messages; destinations listed in ``failing`` raise."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    def send_message(self, destination, text):
        if destination in self.failing:
            raise RuntimeError(f"chat {destination} is unreachable")
        self.sent.append((destination, text))
        return {"ok": True}


class TestConfig(Config):
    __test__ = False

    TELEGRAM_BOT_TOKEN = None
    NOT_FOUND_TEXT = "Ничего не найдено."
    QUERY_LIMIT = 5
    SEARCH_LIMIT = 3
    INLINE_LIMIT = 10
    BROADCAST_ON_STARTUP = False
    FREE_TEXT_MODE = "phrase"
    FUZZY_MATCHING = True
    VERSE_RANGES = True


@pytest.fixture
def corpus():
    return build_corpus(RAW_CORPUS, testament_boundary="от матфея")


@pytest.fixture
def engine(corpus):
    return BibleSearchEngine(corpus)


@pytest.fixture
def formatter():
    return ResultFormatter(not_found_text="Ничего не найдено.")


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'subscribers.db'}"


@pytest.fixture
def subscriber_store(db_url):
    db_engine = make_engine(db_url)
    init_db(db_engine)
    yield SubscriberStore(make_session_factory(db_engine))
    db_engine.dispose()
