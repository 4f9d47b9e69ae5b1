import logging
import time
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from studyflow.consts import VERSION
from studyflow.domain.errors import (
    CardNotFoundError,
    CorruptStoreError,
    DeckNotFoundError,
    StudyflowError,
)
from studyflow.domain.srs.models import ReviewCard

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("studyflow.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"studyflow server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("studyflow server shutting down...")


app = FastAPI(
    title="studyflow",
    description="Flashcard scheduling service.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


def _service():
    from studyflow.application.config import resolve_config
    from studyflow.application.factory import get_deck_service

    return get_deck_service(resolve_config())


def _raise_http(e: Exception) -> None:
    if isinstance(e, (DeckNotFoundError, CardNotFoundError)):
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, StudyflowError) and not isinstance(e, CorruptStoreError):
        raise HTTPException(status_code=409, detail=str(e)) from e
    logger.error(f"Request failed: {e}", exc_info=True)
    raise HTTPException(status_code=500, detail=str(e)) from e


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class DeckSummary(BaseModel):
    id: str
    title: str
    tags: list[str]
    cards: int


class CardResponse(BaseModel):
    id: str
    front: str
    back: str
    interval: int
    repetitions: int
    ease_factor: float
    due_date: date | None
    last_studied: date | None
    known: bool | None

    @classmethod
    def from_card(cls, card: ReviewCard) -> "CardResponse":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            interval=card.interval,
            repetitions=card.repetitions,
            ease_factor=card.ease_factor,
            due_date=card.due_date,
            last_studied=card.last_studied,
            known=card.known,
        )


class ProgressResponse(BaseModel):
    known: int
    studied: int
    total: int
    percent: int


class NewDeckRequest(BaseModel):
    title: str
    tags: list[str] = []


class NewCardRequest(BaseModel):
    front: str
    back: str


class ReviewRequest(BaseModel):
    correct: bool
    today: date | None = None


@app.get("/decks", response_model=list[DeckSummary])
async def list_decks():
    try:
        decks = _service().list_decks()
    except Exception as e:
        _raise_http(e)
    return [DeckSummary(id=d.id, title=d.title, tags=d.tags, cards=len(d.cards)) for d in decks]


@app.post("/decks", response_model=DeckSummary)
async def create_deck(req: NewDeckRequest):
    try:
        deck = _service().create_deck(req.title, req.tags)
    except Exception as e:
        _raise_http(e)
    return DeckSummary(id=deck.id, title=deck.title, tags=deck.tags, cards=0)


@app.get("/decks/{deck_id}/due", response_model=list[CardResponse])
async def due_cards(deck_id: str, include_all: bool = False, today: date | None = None):
    """
    Cards due on `today` (defaults to the server's date), in deck order.
    """
    try:
        cards = _service().due_cards(deck_id, include_all=include_all, today=today)
    except Exception as e:
        _raise_http(e)
    return [CardResponse.from_card(c) for c in cards]


@app.get("/decks/{deck_id}/progress", response_model=ProgressResponse)
async def deck_progress(deck_id: str):
    try:
        p = _service().progress(deck_id)
    except Exception as e:
        _raise_http(e)
    return ProgressResponse(known=p.known, studied=p.studied, total=p.total, percent=p.percent)


@app.post("/decks/{deck_id}/cards", response_model=CardResponse)
async def add_card(deck_id: str, req: NewCardRequest):
    try:
        card = _service().add_card(deck_id, req.front, req.back)
    except Exception as e:
        _raise_http(e)
    return CardResponse.from_card(card)


@app.post("/decks/{deck_id}/cards/{card_id}/review", response_model=CardResponse)
async def review_card(deck_id: str, card_id: str, req: ReviewRequest):
    """
    Record a right/wrong outcome and return the rescheduled card.
    """
    logger.info(f"Review requested: deck={deck_id} card={card_id} correct={req.correct}")
    try:
        card = _service().review(deck_id, card_id, req.correct, today=req.today)
    except Exception as e:
        _raise_http(e)
    return CardResponse.from_card(card)
