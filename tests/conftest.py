"""Shared test fixtures for gitty."""

from pathlib import Path

import pytest

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
DIFFS_DIR = FIXTURES_DIR / "diffs"
CONFIGS_DIR = FIXTURES_DIR / "configs"


class RecordingDisplay:
    """Display that remembers every message in order."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def hint(self, message: str) -> None:
        self.messages.append(("hint", message))

    def of_kind(self, kind: str) -> list[str]:
        return [text for k, text in self.messages if k == kind]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def display() -> RecordingDisplay:
    """Return a display that records messages instead of printing them."""
    return RecordingDisplay()


@pytest.fixture
def simple_diff() -> str:
    """Load a two-file diff."""
    return (DIFFS_DIR / "simple.diff").read_text()


@pytest.fixture
def new_and_deleted_diff() -> str:
    """Load a diff that adds one file and deletes another."""
    return (DIFFS_DIR / "new_and_deleted.diff").read_text()


@pytest.fixture
def valid_global_config() -> Path:
    """Path to a well-formed global config."""
    return CONFIGS_DIR / "global.json"


@pytest.fixture
def broken_config_text() -> str:
    """Config text with a trailing comma and an unquoted value."""
    return (CONFIGS_DIR / "broken.json").read_text()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove provider API keys and gitty settings from the environment."""
    for var in (
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "GITTY_CONFIG_DIR",
        "GITTY_LOG_LEVEL",
        "GITTY_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
