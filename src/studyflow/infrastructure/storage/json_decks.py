"""
Deck repositories: infrastructure adapters for the DeckRepository port.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ulid import ULID

from studyflow.application.srs.scheduler import hydrate_card
from studyflow.consts import FLASHCARDS_FILE
from studyflow.domain.errors import CorruptStoreError, DeckNotFoundError
from studyflow.domain.srs.models import Deck, ReviewCard
from studyflow.domain.srs.ports import DeckRepository

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _deck_from_record(record: dict[str, Any]) -> Deck:
    cards: list[ReviewCard] = []
    for raw in record.get("cards") or []:
        if not isinstance(raw, dict):
            continue
        try:
            cards.append(hydrate_card(raw))
        except ValueError as e:
            logger.warning(f"Skipping card in deck {record.get('id')}: {e}")
    return Deck(
        id=str(record["id"]),
        title=record.get("title", ""),
        cards=cards,
        tags=list(record.get("tags") or []),
        user_id=record.get("userId"),
        created_at=record.get("createdAt"),
        updated_at=record.get("updatedAt"),
    )


class JsonDeckRepository(DeckRepository):
    """
    Stores every user's decks in one `flashcards.json` under `data_dir`.

    Decks without a userId predate per-user storage and are visible to
    everyone; saving one stamps it with the current user.
    """

    def __init__(self, data_dir: Path, user_id: str):
        self.data_dir = Path(data_dir)
        self.user_id = user_id

    @property
    def path(self) -> Path:
        return self.data_dir / FLASHCARDS_FILE

    def _read_all(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(self.path, str(e)) from e
        if not isinstance(data, list):
            logger.warning(f"{self.path} does not hold a list of decks; ignoring it")
            return []
        return data

    def _write_all(self, decks: list[dict[str, Any]]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(decks, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def _visible(self, record: dict[str, Any]) -> bool:
        owner = record.get("userId")
        return owner is None or owner == self.user_id

    def _find(self, decks: list[dict[str, Any]], deck_id: str) -> dict[str, Any]:
        for record in decks:
            if str(record.get("id")) == deck_id and self._visible(record):
                return record
        raise DeckNotFoundError(deck_id)

    def list_decks(self) -> list[Deck]:
        return [_deck_from_record(r) for r in self._read_all() if self._visible(r)]

    def get_deck(self, deck_id: str) -> Deck:
        return _deck_from_record(self._find(self._read_all(), deck_id))

    def create_deck(self, title: str, tags: list[str] | None = None) -> Deck:
        decks = self._read_all()
        now = _now_iso()
        record = {
            "id": str(ULID()),
            "title": title,
            "tags": list(tags or []),
            "cards": [],
            "userId": self.user_id,
            "createdAt": now,
            "updatedAt": now,
        }
        decks.append(record)
        self._write_all(decks)
        return _deck_from_record(record)

    def load_deck(self, deck_id: str) -> list[ReviewCard]:
        return self.get_deck(deck_id).cards

    def save_deck(self, deck_id: str, cards: list[ReviewCard]) -> None:
        decks = self._read_all()
        record = self._find(decks, deck_id)
        record["cards"] = [c.to_dict() for c in cards]
        record["userId"] = self.user_id
        record["updatedAt"] = _now_iso()
        self._write_all(decks)
        logger.debug(f"Saved {len(cards)} cards to deck {deck_id}")


class InMemoryDeckRepository(DeckRepository):
    """Dictionary-backed repository for tests and embedding."""

    def __init__(self, decks: dict[str, list[ReviewCard]] | None = None):
        self._decks: dict[str, Deck] = {}
        for deck_id, cards in (decks or {}).items():
            self._decks[deck_id] = Deck(id=deck_id, title=deck_id, cards=list(cards))

    def list_decks(self) -> list[Deck]:
        return list(self._decks.values())

    def create_deck(self, title: str, tags: list[str] | None = None) -> Deck:
        deck = Deck(id=str(ULID()), title=title, tags=list(tags or []), created_at=_now_iso())
        self._decks[deck.id] = deck
        return deck

    def load_deck(self, deck_id: str) -> list[ReviewCard]:
        if deck_id not in self._decks:
            raise DeckNotFoundError(deck_id)
        return list(self._decks[deck_id].cards)

    def save_deck(self, deck_id: str, cards: list[ReviewCard]) -> None:
        if deck_id not in self._decks:
            raise DeckNotFoundError(deck_id)
        deck = self._decks[deck_id]
        deck.cards = list(cards)
        deck.updated_at = _now_iso()
