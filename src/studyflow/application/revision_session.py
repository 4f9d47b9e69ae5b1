"""
Revision session: a time-boxed pass over a queue of cards.

The countdown decides when the session ends; the scheduler decides what each
answer does to a card. Outcomes already applied stand however the session ends.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from studyflow.application.srs.scheduler import (
    apply_review_outcome,
    check_answer,
    round_half_up,
)
from studyflow.application.timers.base import TimerListener
from studyflow.application.timers.revision import RevisionCountdown
from studyflow.domain.errors import InvalidStateError
from studyflow.domain.srs.models import ReviewCard
from studyflow.domain.timers.models import TimerStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissedAnswer:
    front: str
    expected: str
    given: str
    seconds: int  # seconds into the session when answered


@dataclass
class RevisionStats:
    total_answered: int = 0
    correct: int = 0
    incorrect: int = 0
    total_time: int = 0
    missed: list[MissedAnswer] = field(default_factory=list)

    @property
    def average_time(self) -> float:
        if self.total_answered == 0:
            return 0.0
        return self.total_time / self.total_answered

    @property
    def accuracy(self) -> int:
        if self.total_answered == 0:
            return 0
        return round_half_up(self.correct / self.total_answered * 100)


class RevisionSession:
    """
    Drives one revision pass.

    Args:
        cards: The queue to work through, in order (usually the due cards).
        budget_seconds: Session budget, clamped to [30, 3600].
        today: Review date passed to the scheduler.
    """

    def __init__(self, cards: list[ReviewCard], budget_seconds: int, today: date):
        self.queue = list(cards)
        self.today = today
        self.budget_seconds = budget_seconds
        self.countdown = RevisionCountdown()
        self.stats = RevisionStats()
        self.index = 0
        self._updated: dict[str, ReviewCard] = {}

    def add_listener(self, listener: TimerListener) -> None:
        self.countdown.add_listener(listener)

    @property
    def status(self) -> TimerStatus:
        return self.countdown.status

    @property
    def is_over(self) -> bool:
        return self.countdown.status.is_terminal()

    @property
    def timed_out(self) -> bool:
        return self.countdown.status is TimerStatus.TIMED_OUT

    @property
    def remaining_seconds(self) -> int:
        return self.countdown.remaining_seconds

    @property
    def current_card(self) -> ReviewCard | None:
        if self.is_over or self.index >= len(self.queue):
            return None
        return self.queue[self.index]

    @property
    def updated_cards(self) -> list[ReviewCard]:
        """Cards rescheduled during this session, for the caller to merge and save."""
        return list(self._updated.values())

    def start(self) -> None:
        self.countdown.start(self.budget_seconds)
        logger.info(
            f"Revision started: {len(self.queue)} cards, {self.countdown.budget_seconds}s budget"
        )
        if not self.queue:
            self.countdown.complete_all_cards()

    def tick(self) -> None:
        self.countdown.tick()

    def answer(self, text: str) -> ReviewCard:
        """
        Check a typed answer for the current card and reschedule it.

        Raises:
            InvalidStateError: If the session is not running.
        """
        if self.countdown.status is not TimerStatus.RUNNING:
            raise InvalidStateError(f"Revision session is {self.countdown.status.value}")

        card = self.queue[self.index]
        correct = check_answer(card, text)
        spent = self.countdown.elapsed_seconds

        updated = apply_review_outcome(card, correct, self.today)
        self._updated[card.id] = updated
        self.queue[self.index] = updated

        self.stats.total_answered += 1
        self.stats.total_time += spent
        if correct:
            self.stats.correct += 1
        else:
            self.stats.incorrect += 1
            self.stats.missed.append(
                MissedAnswer(front=card.front, expected=card.back, given=text, seconds=spent)
            )

        self._advance()
        return updated

    def skip(self) -> None:
        if self.countdown.status is not TimerStatus.RUNNING:
            raise InvalidStateError(f"Revision session is {self.countdown.status.value}")
        self._advance()

    def _advance(self) -> None:
        self.index += 1
        if self.index >= len(self.queue):
            self.countdown.complete_all_cards()
