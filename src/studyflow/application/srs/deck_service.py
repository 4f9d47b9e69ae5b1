"""
Deck Service: application layer orchestrator.

Loads decks through the repository port, runs them through the scheduler and
writes the results back. The scheduler itself stays pure.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone

from studyflow.domain.errors import CardNotFoundError
from studyflow.domain.srs.models import Deck, DeckProgress, ReviewCard
from studyflow.domain.srs.ports import DeckRepository

from .scheduler import apply_review_outcome, deck_progress, new_card, select_due_cards

logger = logging.getLogger(__name__)


class DeckService:
    """
    Application service for reviewing and authoring cards.

    Depends on the DeckRepository abstraction, not a concrete adapter.
    """

    def __init__(
        self,
        repository: DeckRepository,
        clock: Callable[[], date] = date.today,
    ):
        """
        Args:
            repository: The port used to load and save decks.
            clock: Supplies "today" when a call does not pass one explicitly.
        """
        self._repo = repository
        self._clock = clock

    def list_decks(self) -> list[Deck]:
        return self._repo.list_decks()

    def create_deck(self, title: str, tags: list[str] | None = None) -> Deck:
        deck = self._repo.create_deck(title.strip(), tags)
        logger.info(f"Created deck {deck.id} ({deck.title})")
        return deck

    def due_cards(
        self, deck_id: str, include_all: bool = False, today: date | None = None
    ) -> list[ReviewCard]:
        cards = self._repo.load_deck(deck_id)
        return select_due_cards(cards, today or self._clock(), include_all=include_all)

    def progress(self, deck_id: str) -> DeckProgress:
        return deck_progress(self._repo.load_deck(deck_id))

    def review(
        self, deck_id: str, card_id: str, correct: bool, today: date | None = None
    ) -> ReviewCard:
        """
        Apply a review outcome to one card and persist the deck.

        Raises:
            DeckNotFoundError: If the deck does not exist.
            CardNotFoundError: If the deck has no card with this id.
        """
        cards = self._repo.load_deck(deck_id)
        target = next((c for c in cards if c.id == card_id), None)
        if target is None:
            raise CardNotFoundError(deck_id, card_id)

        updated = apply_review_outcome(target, correct, today or self._clock())
        self.merge(deck_id, [updated], cards=cards)

        logger.info(
            f"Reviewed {card_id} in {deck_id}: correct={correct} "
            f"interval={updated.interval} due={updated.due_date}"
        )
        return updated

    def merge(
        self,
        deck_id: str,
        updated: list[ReviewCard],
        cards: list[ReviewCard] | None = None,
    ) -> list[ReviewCard]:
        """Replace cards by id and save. Unknown ids are ignored."""
        if cards is None:
            cards = self._repo.load_deck(deck_id)
        by_id = {c.id: c for c in updated}
        merged = [by_id.get(c.id, c) for c in cards]
        self._repo.save_deck(deck_id, merged)
        return merged

    def add_card(
        self, deck_id: str, front: str, back: str, today: date | None = None
    ) -> ReviewCard:
        cards = self._repo.load_deck(deck_id)
        card = new_card(
            front.strip(),
            back.strip(),
            today or self._clock(),
            created_at=datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
        )
        self._repo.save_deck(deck_id, [*cards, card])
        logger.debug(f"Added card {card.id} to {deck_id}")
        return card
