"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from studyflow.domain.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    DEFAULT_REPETITIONS,
)


@dataclass(frozen=True)
class ReviewCard:
    """
    One flashcard's spaced-repetition record.

    Attributes:
        id: Stable identifier, unique within a deck.
        front: Prompt text.
        back: Expected answer text.
        interval: Days until the next scheduled review (>= 1).
        repetitions: Consecutive correct reviews since the last lapse.
        ease_factor: Difficulty multiplier, never below 1.3.
        due_date: Date the card becomes eligible; None means due now.
        last_studied: Date of the most recent review, if any.
        known: Outcome of the most recent review, None if never studied.
    """

    id: str
    front: str = ""
    back: str = ""
    interval: int = DEFAULT_INTERVAL
    repetitions: int = DEFAULT_REPETITIONS
    ease_factor: float = DEFAULT_EASE_FACTOR
    due_date: date | None = None
    last_studied: date | None = None
    known: bool | None = None

    # Carried from the authoring flow, opaque to scheduling
    review_count: int = 0
    created_at: str | None = None

    def is_due(self, today: date) -> bool:
        return self.due_date is None or self.due_date <= today

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase record layout used on disk."""
        data: dict[str, Any] = {
            "id": self.id,
            "front": self.front,
            "back": self.back,
            "interval": self.interval,
            "repetitions": self.repetitions,
            "easeFactor": self.ease_factor,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "lastStudied": self.last_studied.isoformat() if self.last_studied else None,
            "reviewCount": self.review_count,
        }
        # Absent and False mean different things for progress counting
        if self.known is not None:
            data["known"] = self.known
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data


@dataclass(frozen=True)
class DeckProgress:
    known: int
    studied: int
    total: int
    percent: int


@dataclass
class Deck:
    """A titled collection of cards owned by one user."""

    id: str
    title: str
    cards: list[ReviewCard] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
