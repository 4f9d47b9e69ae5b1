"""
Ports (interfaces) for deck persistence.

The scheduling engine never touches storage. Application services depend on
this abstraction, not on concrete adapters.
"""

from abc import ABC, abstractmethod

from .models import Deck, ReviewCard


class DeckRepository(ABC):
    """
    Port for loading and saving decks.

    Implementations:
        - JsonDeckRepository: one JSON file holding every user's decks.
        - InMemoryDeckRepository: dictionary-backed, for tests and embedding.
    """

    @abstractmethod
    def list_decks(self) -> list[Deck]:
        """Return every deck visible to the current user."""

    @abstractmethod
    def create_deck(self, title: str, tags: list[str] | None = None) -> Deck:
        """Create an empty deck and return it."""

    @abstractmethod
    def load_deck(self, deck_id: str) -> list[ReviewCard]:
        """
        Load the cards of a deck, hydrated with scheduling defaults.

        Raises:
            DeckNotFoundError: If no visible deck has this id.
        """

    @abstractmethod
    def save_deck(self, deck_id: str, cards: list[ReviewCard]) -> None:
        """
        Replace the cards of a deck.

        Raises:
            DeckNotFoundError: If no visible deck has this id.
        """
