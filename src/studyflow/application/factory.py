"""
Service Factory
Centralizes wiring of repositories and services from configuration.
"""

from studyflow.application.config import AppConfig
from studyflow.application.srs.deck_service import DeckService
from studyflow.domain.srs.ports import DeckRepository
from studyflow.infrastructure.storage.json_decks import JsonDeckRepository


def get_deck_repository(config: AppConfig) -> DeckRepository:
    return JsonDeckRepository(config.data_dir, config.user_id)


def get_deck_service(config: AppConfig) -> DeckService:
    return DeckService(get_deck_repository(config))
