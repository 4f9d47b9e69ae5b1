from datetime import date, timedelta

from studyflow.domain.srs.models import ReviewCard
from studyflow.domain.timers.models import TimerStatus


def test_card_without_due_date_is_due():
    assert ReviewCard(id="x").is_due(date(2024, 1, 1))


def test_card_due_on_boundary():
    today = date(2024, 1, 1)
    assert ReviewCard(id="x", due_date=today).is_due(today)
    assert not ReviewCard(id="x", due_date=today + timedelta(days=1)).is_due(today)


def test_to_dict_omits_unknown_outcome():
    data = ReviewCard(id="x").to_dict()
    assert "known" not in data
    assert data["dueDate"] is None
    assert data["easeFactor"] == 2.5


def test_status_helpers():
    assert TimerStatus.RUNNING.is_active()
    assert TimerStatus.PAUSED.is_active()
    assert not TimerStatus.IDLE.is_active()
    assert TimerStatus.TIMED_OUT.is_terminal()
    assert TimerStatus.COMPLETED.is_terminal()
    assert not TimerStatus.RUNNING.is_terminal()
