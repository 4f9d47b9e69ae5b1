# Application SRS Package
from .deck_service import DeckService
from .scheduler import (
    apply_review_outcome,
    check_answer,
    deck_progress,
    hydrate_card,
    new_card,
    select_due_cards,
)

__all__ = [
    "DeckService",
    "apply_review_outcome",
    "check_answer",
    "deck_progress",
    "hydrate_card",
    "new_card",
    "select_due_cards",
]
