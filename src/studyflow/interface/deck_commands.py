"""`studyflow deck` subgroup: authoring, due lists, progress and single reviews."""

import json
from datetime import date
from typing import Annotated

import typer

from studyflow.application.factory import get_deck_service
from studyflow.domain.errors import StudyflowError
from studyflow.interface._common import _resolve_with_overrides, fail

deck_app = typer.Typer(help="Manage decks and review cards.", no_args_is_help=True)


def _parse_day(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


@deck_app.command("list")
def list_decks(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List your decks."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        decks = service.list_decks()
    except StudyflowError as e:
        raise fail(e) from e
    if json_output:
        typer.echo(
            json.dumps(
                [{"id": d.id, "title": d.title, "cards": len(d.cards)} for d in decks], indent=2
            )
        )
        return
    if not decks:
        typer.secho("No decks yet. Create one with 'studyflow deck create'.", fg="yellow")
        return
    for d in decks:
        typer.echo(f"{d.id}  {d.title}  ({len(d.cards)} cards)")


@deck_app.command("create")
def create_deck(
    title: Annotated[str, typer.Argument(help="Deck title.")],
    tag: Annotated[list[str] | None, typer.Option("--tag", help="Tag (repeatable).")] = None,
):
    """Create an empty deck."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        deck = service.create_deck(title, tag or [])
    except StudyflowError as e:
        raise fail(e) from e
    typer.secho(f"Created deck {deck.id} ({deck.title})", fg="green")


@deck_app.command("add")
def add_card(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    front: Annotated[str, typer.Option(help="Prompt side.")],
    back: Annotated[str, typer.Option(help="Answer side.")],
):
    """Add a card, due immediately."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        card = service.add_card(deck_id, front, back)
    except StudyflowError as e:
        raise fail(e) from e
    typer.secho(f"Added card {card.id}", fg="green")


@deck_app.command("due")
def due(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    include_all: Annotated[
        bool, typer.Option("--all", help="Study all cards, ignoring due dates.")
    ] = False,
    today: Annotated[str | None, typer.Option(help="Reference date (YYYY-MM-DD).")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the cards due for review."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        cards = service.due_cards(deck_id, include_all=include_all, today=_parse_day(today))
    except StudyflowError as e:
        raise fail(e) from e

    if json_output:
        typer.echo(json.dumps([c.to_dict() for c in cards], indent=2))
        return
    if not cards:
        msg = "No cards in this deck." if include_all else "All cards are up to date!"
        typer.secho(msg, fg="green")
        return
    for c in cards:
        due_on = c.due_date.isoformat() if c.due_date else "now"
        typer.echo(f"{c.id}  {c.front}  (due {due_on}, interval {c.interval}d)")


@deck_app.command("progress")
def progress(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
):
    """Show known/studied counts for a deck."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        p = service.progress(deck_id)
    except StudyflowError as e:
        raise fail(e) from e
    typer.echo(f"Known: {p.known}  Studied: {p.studied}  Total: {p.total}  ({p.percent}%)")


@deck_app.command("review")
def review(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Outcome of the review.")
    ],
    today: Annotated[str | None, typer.Option(help="Review date (YYYY-MM-DD).")] = None,
):
    """Record one review outcome and reschedule the card."""
    service = get_deck_service(_resolve_with_overrides())
    try:
        card = service.review(deck_id, card_id, correct, today=_parse_day(today))
    except StudyflowError as e:
        raise fail(e) from e
    typer.echo(
        f"Next review {card.due_date.isoformat()} "
        f"(interval {card.interval}d, ease {card.ease_factor:.2f})"
    )
