from datetime import date

import pytest

from studyflow.application.srs.scheduler import new_card
from studyflow.infrastructure.storage.json_decks import InMemoryDeckRepository


@pytest.fixture
def today():
    return date(2024, 3, 10)


@pytest.fixture
def fresh_card(today):
    return new_card("bonjour", "hello", today, card_id="c1")


@pytest.fixture
def memory_repo(today):
    cards = [
        new_card("uno", "one", today, card_id="a"),
        new_card("dos", "two", today, card_id="b"),
        new_card("tres", "three", today, card_id="c"),
    ]
    return InMemoryDeckRepository({"spanish": cards})


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "STUDYFLOW_DATA_DIR",
        "STUDYFLOW_USER_ID",
        "STUDYFLOW_FOCUS_SECONDS",
        "STUDYFLOW_BREAK_SECONDS",
        "STUDYFLOW_REVISION_BUDGET_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def data_dir(tmp_path, mock_home, monkeypatch):
    """Points the JSON deck store at a temp dir via the environment."""
    d = tmp_path / "data"
    monkeypatch.setenv("STUDYFLOW_DATA_DIR", str(d))
    monkeypatch.setenv("STUDYFLOW_USER_ID", "ada@example.com")
    return d
