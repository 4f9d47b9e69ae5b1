"""
Spaced-repetition scheduler (simplified SM-2).

Pure computation: no I/O, no clock reads. "today" is always a parameter.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from ulid import ULID

from studyflow.domain.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    DEFAULT_REPETITIONS,
    MIN_EASE_FACTOR,
    QUALITY_CORRECT,
    QUALITY_INCORRECT,
    SECOND_INTERVAL,
)
from studyflow.domain.srs.models import DeckProgress, ReviewCard


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def generate_card_id() -> str:
    return str(ULID())


def new_card(
    front: str,
    back: str,
    today: date,
    card_id: str | None = None,
    created_at: str | None = None,
) -> ReviewCard:
    """Author a card with default scheduling state, due immediately."""
    return ReviewCard(
        id=card_id or generate_card_id(),
        front=front,
        back=back,
        interval=DEFAULT_INTERVAL,
        repetitions=DEFAULT_REPETITIONS,
        ease_factor=DEFAULT_EASE_FACTOR,
        due_date=today,
        created_at=created_at,
    )


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def hydrate_card(raw: Mapping[str, Any]) -> ReviewCard:
    """
    Normalize a stored card record into a fully-typed ReviewCard.

    Legacy records may lack any of the scheduling fields; those are filled
    with authoring defaults. Out-of-range values are clamped so interval >= 1,
    repetitions >= 0 and ease factor >= the SM-2 floor. `known` must be a real
    boolean; anything else counts as never reviewed. Both camelCase and
    snake_case keys are accepted.

    Raises:
        ValueError: If the record has no id.
    """
    card_id = _pick(raw, "id")
    if card_id is None:
        raise ValueError("Card record has no id")

    known = _pick(raw, "known")
    if not isinstance(known, bool):
        known = None
    ease_factor = _as_float(_pick(raw, "easeFactor", "ease_factor"), DEFAULT_EASE_FACTOR)

    return ReviewCard(
        id=str(card_id),
        front=str(_pick(raw, "front") or ""),
        back=str(_pick(raw, "back") or ""),
        interval=max(1, _as_int(_pick(raw, "interval"), DEFAULT_INTERVAL)),
        repetitions=max(0, _as_int(_pick(raw, "repetitions"), DEFAULT_REPETITIONS)),
        ease_factor=max(MIN_EASE_FACTOR, ease_factor),
        due_date=_as_date(_pick(raw, "dueDate", "due_date")),
        last_studied=_as_date(_pick(raw, "lastStudied", "last_studied")),
        known=known,
        review_count=_as_int(_pick(raw, "reviewCount", "review_count"), 0),
        created_at=_pick(raw, "createdAt", "created_at"),
    )


def select_due_cards(
    deck: Iterable[ReviewCard], today: date, include_all: bool = False
) -> list[ReviewCard]:
    """
    Return the cards eligible for review on `today`, preserving order.

    With include_all the whole deck is returned unchanged ("study all" mode).
    """
    if include_all:
        return list(deck)
    return [card for card in deck if card.is_due(today)]


def apply_review_outcome(card: ReviewCard, correct: bool, today: date) -> ReviewCard:
    """
    Apply one binary review outcome and return the rescheduled card.

    Correct answers count as quality 5, incorrect as quality 2. On success the
    interval goes 1, 6, then previous interval times the current ease factor,
    and the ease factor grows by 0.1. A lapse resets repetitions and interval
    but keeps the ease factor. The input card is never mutated.
    """
    interval = card.interval if card.interval is not None else DEFAULT_INTERVAL
    repetitions = card.repetitions if card.repetitions is not None else DEFAULT_REPETITIONS
    ease_factor = card.ease_factor if card.ease_factor is not None else DEFAULT_EASE_FACTOR

    quality = QUALITY_CORRECT if correct else QUALITY_INCORRECT

    if correct:
        repetitions += 1
        if repetitions == 1:
            interval = 1
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(interval * ease_factor)
        ease_factor = max(
            MIN_EASE_FACTOR,
            ease_factor + 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02),
        )
    else:
        repetitions = 0
        interval = 1

    return replace(
        card,
        interval=interval,
        repetitions=repetitions,
        ease_factor=ease_factor,
        due_date=today + timedelta(days=interval),
        last_studied=today,
        known=correct,
        review_count=card.review_count + 1,
    )


def deck_progress(deck: Iterable[ReviewCard]) -> DeckProgress:
    cards = list(deck)
    total = len(cards)
    if total == 0:
        return DeckProgress(known=0, studied=0, total=0, percent=0)

    known = sum(1 for c in cards if c.known is True)
    studied = sum(1 for c in cards if c.known is not None)
    return DeckProgress(
        known=known,
        studied=studied,
        total=total,
        percent=round_half_up(known / total * 100),
    )


def check_answer(card: ReviewCard, answer: str) -> bool:
    """Compare a typed answer against the card's back, ignoring case and padding."""
    return answer.strip().lower() == card.back.strip().lower()
