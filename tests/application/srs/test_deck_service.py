from datetime import timedelta

import pytest

from studyflow.application.srs.deck_service import DeckService
from studyflow.domain.errors import CardNotFoundError, DeckNotFoundError


@pytest.fixture
def service(memory_repo, today):
    return DeckService(memory_repo, clock=lambda: today)


def test_review_persists_updated_card(service, memory_repo, today):
    updated = service.review("spanish", "b", correct=True)

    assert updated.interval == 1
    assert updated.due_date == today + timedelta(days=1)
    stored = {c.id: c for c in memory_repo.load_deck("spanish")}
    assert stored["b"] == updated
    assert stored["a"].known is None


def test_review_keeps_deck_order(service, memory_repo):
    service.review("spanish", "a", correct=False)
    assert [c.id for c in memory_repo.load_deck("spanish")] == ["a", "b", "c"]


def test_reviewed_card_leaves_due_list(service, today):
    service.review("spanish", "a", correct=True)
    assert [c.id for c in service.due_cards("spanish")] == ["b", "c"]
    assert len(service.due_cards("spanish", include_all=True)) == 3
    assert [c.id for c in service.due_cards("spanish", today=today + timedelta(days=1))] == [
        "a",
        "b",
        "c",
    ]


def test_progress(service):
    service.review("spanish", "a", correct=True)
    service.review("spanish", "b", correct=False)
    p = service.progress("spanish")
    assert (p.known, p.studied, p.total, p.percent) == (1, 2, 3, 33)


def test_unknown_card(service):
    with pytest.raises(CardNotFoundError):
        service.review("spanish", "nope", correct=True)


def test_unknown_deck(service):
    with pytest.raises(DeckNotFoundError):
        service.due_cards("german")


def test_add_card_is_due_today(service, today):
    card = service.add_card("spanish", " cuatro ", "four")
    assert card.front == "cuatro"
    assert card.due_date == today
    assert card.created_at is not None
    assert service.due_cards("spanish")[-1].id == card.id


def test_merge_ignores_unknown_ids(service, memory_repo, fresh_card):
    merged = service.merge("spanish", [fresh_card])
    assert [c.id for c in merged] == ["a", "b", "c"]


def test_create_deck(service):
    deck = service.create_deck("  Biology ", ["science"])
    assert deck.title == "Biology"
    assert service.progress(deck.id).total == 0
