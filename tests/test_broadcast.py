"""Tests for the scheduled verse broadcast."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from conftest import FirstChoice, RecordingSender
from models.corpus import build_corpus
from utils.broadcast import VerseBroadcaster, parse_allowed_hours
from utils.search import BibleSearchEngine

MOSCOW = ZoneInfo("Europe/Moscow")
NOON = datetime(2026, 3, 1, 12, 0, tzinfo=MOSCOW)


@pytest.fixture
def make_broadcaster(corpus, subscriber_store):
    created = []

    def factory(sender=None, crons=("0 */2 * * *",), engine=None, **kwargs):
        kwargs.setdefault("endings", ["Аминь"])
        broadcaster = VerseBroadcaster(
            engine or BibleSearchEngine(corpus, rng=FirstChoice()),
            subscriber_store,
            sender or RecordingSender(),
            list(crons),
            rng=FirstChoice(),
            **kwargs,
        )
        created.append(broadcaster)
        return broadcaster

    yield factory
    for broadcaster in created:
        broadcaster.shutdown()


def results(futures):
    return [future.result(timeout=5) for future in futures]


def test_every_subscriber_gets_the_same_verse(make_broadcaster, subscriber_store):
    for destination in ["1", "2", "3"]:
        subscriber_store.add(destination)
    sender = RecordingSender()
    broadcaster = make_broadcaster(sender)

    assert results(broadcaster.broadcast(now=NOON)) == [True, True, True]

    expected = '_"В начале сотворил Бог небо и землю."_\n_Бытие_ 1:1\n\n🌿 _Аминь_'
    assert sorted(sender.sent) == [("1", expected), ("2", expected), ("3", expected)]


def test_failed_destination_does_not_stop_others(make_broadcaster, subscriber_store):
    for destination in ["1", "2", "3"]:
        subscriber_store.add(destination)
    sender = RecordingSender(failing={"2"})
    broadcaster = make_broadcaster(sender)

    assert results(broadcaster.broadcast(now=NOON)) == [True, False, True]
    assert sorted(destination for destination, _ in sender.sent) == ["1", "3"]


def test_no_broadcast_outside_allowed_hours(make_broadcaster, subscriber_store):
    subscriber_store.add("1")
    sender = RecordingSender()
    broadcaster = make_broadcaster(sender, allowed_hours="7-23")
    night = datetime(2026, 3, 1, 3, 0, tzinfo=MOSCOW)

    assert broadcaster.broadcast(now=night) == []
    assert sender.sent == []

    assert results(broadcaster.broadcast(force=True, now=night)) == [True]


def test_allowed_hours_use_broadcast_timezone(make_broadcaster):
    broadcaster = make_broadcaster(allowed_hours="7-23", timezone="Europe/Moscow")

    # 03:00 UTC is 06:00 in Moscow
    assert not broadcaster.is_allowed_hour(datetime(2026, 3, 1, 3, 0, tzinfo=ZoneInfo("UTC")))
    assert broadcaster.is_allowed_hour(datetime(2026, 3, 1, 4, 0, tzinfo=ZoneInfo("UTC")))


def test_allowed_hours_can_wrap_midnight(make_broadcaster):
    broadcaster = make_broadcaster(allowed_hours="22-6")

    assert broadcaster.is_allowed_hour(datetime(2026, 3, 1, 23, 0, tzinfo=MOSCOW))
    assert broadcaster.is_allowed_hour(datetime(2026, 3, 1, 3, 0, tzinfo=MOSCOW))
    assert not broadcaster.is_allowed_hour(NOON)


def test_nothing_to_do_without_subscribers(make_broadcaster):
    sender = RecordingSender()

    assert make_broadcaster(sender).broadcast(force=True) == []
    assert sender.sent == []


def test_empty_corpus_skips_cycle(make_broadcaster, subscriber_store):
    subscriber_store.add("1")
    sender = RecordingSender()
    engine = BibleSearchEngine(build_corpus([]))

    assert make_broadcaster(sender, engine=engine).broadcast(force=True) == []
    assert sender.sent == []


def test_no_ending_without_endings(make_broadcaster):
    broadcaster = make_broadcaster(endings=[])

    assert "🌿" not in broadcaster.build_message()


@pytest.mark.parametrize("crons", [("not a cron",), ("0 */2 * *",), ("61 * * * *",)])
def test_malformed_cron_fails_at_construction(make_broadcaster, crons):
    with pytest.raises(ValueError):
        make_broadcaster(crons=crons)


@pytest.mark.parametrize("value", ["7", "7-25", "a-b", ""])
def test_malformed_allowed_hours(value):
    with pytest.raises(ValueError):
        parse_allowed_hours(value)


def test_parse_allowed_hours():
    assert parse_allowed_hours("7-23") == (7, 23)
    assert parse_allowed_hours("22-6") == (22, 6)


def test_scheduler_registers_one_job_per_expression(make_broadcaster):
    broadcaster = make_broadcaster(crons=("0 */2 * * *", "30 8 * * *"), send_on_startup=True)

    broadcaster.start()
    try:
        job_ids = sorted(job.id for job in broadcaster.scheduler.get_jobs())
        assert job_ids == ["broadcast-0", "broadcast-1", "broadcast-startup"]
    finally:
        broadcaster.shutdown()

    assert not broadcaster.scheduler.running
