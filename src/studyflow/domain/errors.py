"""Error taxonomy shared by every layer."""

from pathlib import Path


class StudyflowError(Exception):
    """Base class for all studyflow errors."""


class InvalidStateError(StudyflowError):
    """A control call was made in a state that does not allow it.

    Raised for caller-level conflicts such as starting a timer that is
    already active. Ticks delivered to a stopped machine never raise.
    """


class DeckNotFoundError(StudyflowError):
    def __init__(self, deck_id: str):
        super().__init__(f"Deck not found: {deck_id}")
        self.deck_id = deck_id


class CardNotFoundError(StudyflowError):
    def __init__(self, deck_id: str, card_id: str):
        super().__init__(f"Card {card_id} not found in deck {deck_id}")
        self.deck_id = deck_id
        self.card_id = card_id


class CorruptStoreError(StudyflowError):
    """The deck store exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read deck store {path}: {reason}")
        self.path = path
