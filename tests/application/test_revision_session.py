from dataclasses import replace

import pytest

from studyflow.application.revision_session import RevisionSession
from studyflow.application.srs.scheduler import new_card
from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import TimerStatus


@pytest.fixture
def cards(today):
    return [
        new_card("uno", "one", today, card_id="a"),
        new_card("dos", "two", today, card_id="b"),
        new_card("tres", "three", today, card_id="c"),
    ]


def test_answering_every_card_completes(cards, today):
    session = RevisionSession(cards, 60, today)
    session.start()

    session.tick()
    session.answer("One")
    session.tick()
    session.answer("wrong")
    session.answer(" three ")

    assert session.status is TimerStatus.COMPLETED
    assert session.current_card is None
    assert session.stats.total_answered == 3
    assert session.stats.correct == 2
    assert session.stats.incorrect == 1
    assert session.stats.accuracy == 67
    assert session.stats.total_time == 1 + 2 + 2
    assert session.stats.missed[0].expected == "two"
    assert session.stats.missed[0].given == "wrong"

    updated = {c.id: c for c in session.updated_cards}
    assert updated["a"].known is True
    assert updated["b"].known is False
    assert updated["b"].repetitions == 0


def test_timeout_ends_session_and_keeps_answers(cards, today):
    session = RevisionSession(cards, 10, today)
    session.start()
    session.answer("one")

    for _ in range(30):
        session.tick()

    assert session.timed_out
    assert session.remaining_seconds == 0
    assert session.current_card is None
    with pytest.raises(InvalidStateError):
        session.answer("two")
    assert [c.id for c in session.updated_cards] == ["a"]


def test_answer_before_start_raises(cards, today):
    session = RevisionSession(cards, 60, today)
    with pytest.raises(InvalidStateError):
        session.answer("one")


def test_skip_advances_without_rescheduling(cards, today):
    session = RevisionSession(cards, 60, today)
    session.start()
    session.skip()
    assert session.current_card.id == "b"
    assert session.updated_cards == []


def test_empty_queue_completes_immediately(today):
    session = RevisionSession([], 60, today)
    session.start()
    assert session.status is TimerStatus.COMPLETED


def test_stats_average_time(cards, today):
    session = RevisionSession([replace(cards[0]), cards[1]], 60, today)
    session.start()
    for _ in range(4):
        session.tick()
    session.answer("one")
    for _ in range(2):
        session.tick()
    session.answer("two")
    assert session.stats.average_time == pytest.approx(5.0)
