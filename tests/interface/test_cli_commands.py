"""Tests for CLI commands: deck subgroup, timer, revise, config."""

import json
import logging

import pytest
from typer.testing import CliRunner

from studyflow.domain.errors import DeckNotFoundError
from studyflow.infrastructure.storage.json_decks import JsonDeckRepository
from studyflow.interface.cli import app, humanize_error

runner = CliRunner()


@pytest.fixture
def repo(data_dir):
    return JsonDeckRepository(data_dir, "ada@example.com")


@pytest.fixture
def deck_id(repo):
    result = runner.invoke(app, ["deck", "create", "French", "--tag", "language"])
    assert result.exit_code == 0, result.output
    return repo.list_decks()[0].id


def add(deck_id, front, back):
    result = runner.invoke(app, ["deck", "add", deck_id, "--front", front, "--back", back])
    assert result.exit_code == 0, result.output


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "spaced-repetition" in result.stdout
    assert "deck" in result.stdout
    assert "timer" in result.stdout
    assert "revise" in result.stdout


# --- Deck ---


def test_deck_list_empty(data_dir):
    result = runner.invoke(app, ["deck", "list"])
    assert result.exit_code == 0
    assert "No decks yet" in result.stdout


def test_deck_create_and_list(deck_id, repo):
    result = runner.invoke(app, ["deck", "list", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"id": deck_id, "title": "French", "cards": 0}]
    assert repo.list_decks()[0].tags == ["language"]


def test_add_then_due(deck_id):
    add(deck_id, "chat", "cat")
    add(deck_id, "chien", "dog")

    result = runner.invoke(app, ["deck", "due", deck_id, "--json"])
    assert result.exit_code == 0
    cards = json.loads(result.stdout)
    assert [c["front"] for c in cards] == ["chat", "chien"]
    assert cards[0]["interval"] == 1


def test_review_reschedules(deck_id, repo):
    add(deck_id, "chat", "cat")
    card_id = repo.load_deck(deck_id)[0].id

    result = runner.invoke(
        app, ["deck", "review", deck_id, card_id, "--correct", "--today", "2024-03-10"]
    )
    assert result.exit_code == 0, result.output
    assert "Next review 2024-03-11" in result.stdout

    result = runner.invoke(app, ["deck", "due", deck_id, "--today", "2024-03-10"])
    assert "All cards are up to date" in result.stdout

    result = runner.invoke(app, ["deck", "progress", deck_id])
    assert "Known: 1  Studied: 1  Total: 1  (100%)" in result.stdout


def test_review_incorrect(deck_id, repo):
    add(deck_id, "chat", "cat")
    card_id = repo.load_deck(deck_id)[0].id
    result = runner.invoke(
        app, ["deck", "review", deck_id, card_id, "--incorrect", "--today", "2024-03-10"]
    )
    assert result.exit_code == 0
    assert repo.load_deck(deck_id)[0].known is False


def test_unknown_deck_fails(data_dir):
    result = runner.invoke(app, ["deck", "due", "nope"])
    assert result.exit_code == 1
    assert "No deck with id 'nope'" in result.output


def test_unknown_card_fails(deck_id):
    result = runner.invoke(app, ["deck", "review", deck_id, "ghost", "--correct"])
    assert result.exit_code == 1
    assert "No card 'ghost'" in result.output


def test_bad_date(deck_id):
    result = runner.invoke(app, ["deck", "due", deck_id, "--today", "yesterday"])
    assert result.exit_code != 0


# --- Timers ---


def test_plain_timer_records_session(data_dir):
    result = runner.invoke(app, ["timer", "Maths", "--limit", "3", "--interval", "0"])
    assert result.exit_code == 0, result.output
    assert "Recorded 00:03 on Maths" in result.stdout


def test_pomodoro_timer_cycles(data_dir):
    result = runner.invoke(
        app,
        [
            "timer",
            "Chemistry",
            "--pomodoro",
            "--focus-seconds",
            "2",
            "--break-seconds",
            "1",
            "--limit",
            "3",
            "--interval",
            "0",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Break time!" in result.stdout
    assert "Focus time!" in result.stdout
    assert "Total this run: 00:02" in result.stdout


# --- Revision ---


def test_revise_completes_and_saves(deck_id, repo):
    add(deck_id, "chat", "cat")
    add(deck_id, "chien", "dog")

    result = runner.invoke(app, ["revise", deck_id, "--budget", "60"], input="Cat\nwolf\n")

    assert result.exit_code == 0, result.output
    assert "Revision complete!" in result.stdout
    assert "Accuracy 50%" in result.stdout
    assert "expected 'dog', you said 'wolf'" in result.stdout

    known = {c.front: c.known for c in repo.load_deck(deck_id)}
    assert known == {"chat": True, "chien": False}


def test_revise_interrupted_keeps_answered_cards(deck_id, repo, monkeypatch):
    from studyflow.application.revision_session import RevisionSession

    add(deck_id, "chat", "cat")
    add(deck_id, "chien", "dog")

    original_answer = RevisionSession.answer

    def answer_then_interrupt(self, text):
        original_answer(self, text)
        raise KeyboardInterrupt

    monkeypatch.setattr(RevisionSession, "answer", answer_then_interrupt)

    result = runner.invoke(app, ["revise", deck_id, "--budget", "60"], input="cat\ndog\n")

    assert result.exit_code == 0, result.output
    assert "Revision stopped." in result.stdout
    known = {c.front: c.known for c in repo.load_deck(deck_id)}
    assert known == {"chat": True, "chien": None}


def test_revise_nothing_due(deck_id):
    result = runner.invoke(app, ["revise", deck_id])
    assert result.exit_code == 0
    assert "No cards due" in result.stdout


# --- Config ---


def test_config_show(data_dir):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["focus_seconds"] == 1500
    assert data["user_id"] == "ada@example.com"
    assert data["data_dir"] == str(data_dir)


def test_humanize_error():
    assert "deck list" in humanize_error(DeckNotFoundError("x"))


@pytest.fixture
def restore_log_level():
    logger = logging.getLogger("studyflow")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_verbosity_defaults_from_config(data_dir, monkeypatch, restore_log_level):
    monkeypatch.setenv("STUDYFLOW_VERBOSE", "2")
    result = runner.invoke(app, ["deck", "list"])
    assert result.exit_code == 0
    assert restore_log_level.level == logging.DEBUG


def test_verbose_flag_wins_over_config(data_dir, monkeypatch, restore_log_level):
    monkeypatch.setenv("STUDYFLOW_VERBOSE", "2")
    result = runner.invoke(app, ["-v", "deck", "list"])
    assert result.exit_code == 0
    assert restore_log_level.level == logging.INFO


def test_corrupt_store_reports_file(data_dir):
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "flashcards.json").write_text("{oops", encoding="utf-8")
    result = runner.invoke(app, ["deck", "due", "anything"])
    assert result.exit_code == 1
    assert "Cannot read deck store" in result.output
    assert "flashcards.json" in result.output


def test_revise_help_lists_budget_presets():
    result = runner.invoke(app, ["revise", "--help"])
    assert result.exit_code == 0
    assert "600" in result.stdout
