"""studyflow CLI: root commands and subgroup registration."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from studyflow.application.config import resolve_config

# Re-export for callers that import it from the CLI module
from studyflow.interface._common import humanize_error  # noqa: F401

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="studyflow: spaced-repetition flashcards and study timers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from studyflow.interface.deck_commands import deck_app  # noqa: E402
from studyflow.interface.session_commands import revise, timer  # noqa: E402

app.add_typer(deck_app, name="deck")
app.command("timer")(timer)
app.command("revise")(revise)

config_app = typer.Typer(help="Manage studyflow configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for studyflow."""
    ctx.ensure_object(dict)
    if not verbose:
        verbose = resolve_config().verbose
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger("studyflow").setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger("studyflow").setLevel(logging.INFO)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run("studyflow.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
