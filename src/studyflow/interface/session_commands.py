"""Live study sessions in the terminal: the study timer and revision mode."""

import asyncio
import logging
import sys
import threading
from datetime import date
from typing import Annotated

import typer

from studyflow.application.factory import get_deck_service
from studyflow.application.revision_session import RevisionSession
from studyflow.application.session_context import SessionContext
from studyflow.domain.constants import REVISION_PRESETS, TICK_INTERVAL
from studyflow.domain.errors import StudyflowError
from studyflow.domain.timers.models import EventKind, TimerEvent, TimerMode
from studyflow.infrastructure.ticker import Ticker
from studyflow.interface._common import _resolve_with_overrides, fail

logger = logging.getLogger(__name__)


_PRESETS_HELP = ", ".join(str(s) for s in REVISION_PRESETS)


def fmt_clock(seconds: int) -> str:
    """Format seconds as MM:SS (or H:MM:SS past an hour)."""
    h, rest = divmod(max(0, seconds), 3600)
    m, s = divmod(rest, 60)
    if h:
        return f"{h}:{m:02}:{s:02}"
    return f"{m:02}:{s:02}"


def timer(
    subject: Annotated[str, typer.Argument(help="What you are studying.")] = "General",
    topic: Annotated[str, typer.Option(help="Topic within the subject.")] = "",
    pomodoro: Annotated[
        bool, typer.Option("--pomodoro", help="Alternate focus and break periods.")
    ] = False,
    focus_seconds: Annotated[int | None, typer.Option(help="Focus period length.")] = None,
    break_seconds: Annotated[int | None, typer.Option(help="Break period length.")] = None,
    limit: Annotated[
        int | None, typer.Option(help="Stop automatically after this many seconds.")
    ] = None,
    interval: Annotated[float, typer.Option(hidden=True)] = TICK_INTERVAL,
):
    """Run a study timer. Press Ctrl-C to stop and record the session."""
    config = _resolve_with_overrides(focus_seconds=focus_seconds, break_seconds=break_seconds)

    def notify(event: TimerEvent) -> None:
        label = "Focus" if event.mode is TimerMode.POMODORO_FOCUS else "Break"
        typer.secho(f"\n{label} time! ({fmt_clock(event.seconds)})", fg="cyan")

    context = SessionContext.create(config, notifier=notify)
    if pomodoro:
        machine = context.start_pomodoro(subject, topic)
    else:
        machine = context.start_plain(subject, topic)

    def on_tick() -> None:
        context.tick()
        state = machine.state
        if pomodoro:
            phase = "focus" if state.mode is TimerMode.POMODORO_FOCUS else "break"
            line = f"{phase} {fmt_clock(state.remaining_seconds)}  cycles {state.cycle_count}"
        else:
            line = fmt_clock(state.elapsed_seconds)
        typer.echo(f"\r{line}", nl=False)

    async def run() -> None:
        ticker = Ticker(on_tick, interval=interval)
        try:
            if limit is not None:
                await ticker.run_for(limit)
            else:
                await ticker.start()
        finally:
            await ticker.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass

    record = context.stop()
    context.dispose()
    typer.echo("")
    if record is None:
        typer.secho("Nothing to record.", fg="yellow")
    else:
        typer.secho(
            f"Recorded {fmt_clock(record.seconds)} on {record.subject}",
            fg="green",
        )
    total = context.log.total_seconds()
    typer.echo(f"Total this run: {fmt_clock(total)}")


def _pump_stdin(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue) -> None:
    # Daemon thread: never blocks interpreter exit while waiting on input
    stream = sys.stdin

    def pump() -> None:
        for line in stream:
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(queue.put_nowait, line.rstrip("\n"))
        if not loop.is_closed():
            loop.call_soon_threadsafe(queue.put_nowait, None)

    threading.Thread(target=pump, daemon=True).start()


def revise(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    budget: Annotated[
        int | None,
        typer.Option(
            help=f"Session time in seconds (30-3600), e.g. {_PRESETS_HELP}. Defaults to config."
        ),
    ] = None,
    include_all: Annotated[
        bool, typer.Option("--all", help="Revise every card, not just due ones.")
    ] = False,
    interval: Annotated[float, typer.Option(hidden=True)] = TICK_INTERVAL,
):
    """Time-boxed revision: type answers until the cards or the clock run out."""
    config = _resolve_with_overrides(revision_budget_seconds=budget)
    service = get_deck_service(config)
    today = date.today()

    try:
        cards = service.due_cards(deck_id, include_all=include_all, today=today)
    except StudyflowError as e:
        raise fail(e) from e

    if not cards:
        typer.secho("No cards due for review today.", fg="green")
        return

    session = RevisionSession(cards, config.revision_budget_seconds, today)

    async def run() -> None:
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue = asyncio.Queue()
        finished = asyncio.Event()

        def on_event(event: TimerEvent) -> None:
            if event.kind in (EventKind.TIMED_OUT, EventKind.COMPLETED):
                finished.set()

        session.add_listener(on_event)
        session.start()
        typer.echo(
            f"Revision: {len(cards)} cards, {fmt_clock(session.countdown.budget_seconds)}"
        )

        ticker = Ticker(session.tick, interval=interval)
        ticker.start()
        _pump_stdin(loop, lines)
        try:
            while not session.is_over:
                card = session.current_card
                typer.echo(f"\n[{fmt_clock(session.remaining_seconds)}] {card.front}")
                typer.echo("> ", nl=False)

                get_line = asyncio.ensure_future(lines.get())
                wait_done = asyncio.ensure_future(finished.wait())
                await asyncio.wait({get_line, wait_done}, return_when=asyncio.FIRST_COMPLETED)
                wait_done.cancel()

                if not get_line.done():
                    get_line.cancel()
                    break
                text = get_line.result()
                if text is None:
                    break
                if session.is_over:
                    break

                updated = session.answer(text)
                if updated.known:
                    typer.secho("Correct!", fg="green")
                else:
                    typer.secho(f"Answer: {card.back}", fg="red")
        finally:
            await ticker.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass

    if session.updated_cards:
        service.merge(deck_id, session.updated_cards)
        logger.info(f"Merged {len(session.updated_cards)} reviewed cards into deck {deck_id}")

    stats = session.stats
    if session.timed_out:
        headline, color = "Time's up!", "yellow"
    elif session.is_over:
        headline, color = "Revision complete!", "green"
    else:
        headline, color = "Revision stopped.", "yellow"
    typer.secho(f"\n{headline}", fg=color)
    typer.echo(
        f"Answered {stats.total_answered}  Correct {stats.correct}  "
        f"Incorrect {stats.incorrect}  Accuracy {stats.accuracy}%"
    )
    typer.echo(f"Time used: {fmt_clock(session.countdown.elapsed_seconds)}")
    for missed in stats.missed:
        typer.echo(f"  {missed.front}: expected {missed.expected!r}, you said {missed.given!r}")
