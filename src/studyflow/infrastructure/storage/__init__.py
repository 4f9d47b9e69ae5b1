# Storage Adapters Package
from .json_decks import InMemoryDeckRepository, JsonDeckRepository

__all__ = ["JsonDeckRepository", "InMemoryDeckRepository"]
