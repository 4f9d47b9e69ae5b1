"""Helpers shared by the CLI command modules."""

from typing import Any

import typer

from studyflow.application.config import AppConfig, resolve_config
from studyflow.domain.errors import (
    CardNotFoundError,
    DeckNotFoundError,
    InvalidStateError,
    StudyflowError,
)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, letting only explicitly passed CLI values win."""
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def humanize_error(error: Exception) -> str:
    """Turn a domain error into a one-line message for the terminal."""
    if isinstance(error, DeckNotFoundError):
        return f"No deck with id '{error.deck_id}'. Run 'studyflow deck list' to see your decks."
    if isinstance(error, CardNotFoundError):
        return f"No card '{error.card_id}' in deck '{error.deck_id}'."
    if isinstance(error, InvalidStateError):
        return f"Not allowed right now: {error}"
    if isinstance(error, StudyflowError):
        return str(error)
    return f"Unexpected error: {error}"


def fail(error: Exception) -> typer.Exit:
    typer.secho(humanize_error(error), fg="red", err=True)
    return typer.Exit(1)
