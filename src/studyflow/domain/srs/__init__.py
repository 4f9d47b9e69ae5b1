# Domain SRS Package
from .models import Deck, DeckProgress, ReviewCard
from .ports import DeckRepository

__all__ = ["ReviewCard", "DeckProgress", "Deck", "DeckRepository"]
