"""Pytest configuration and fixtures for agentwait tests."""

import json
import logging

import pytest


@pytest.fixture(autouse=True)
def tmp_home(tmp_path, monkeypatch):
    """
    Mock home directory so no test touches the real ~/.agentwait.

    Args:
        tmp_path: Pytest temporary directory
        monkeypatch: Pytest monkeypatch fixture

    Yields:
        Path: Temporary home directory
    """
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("AGENTWAIT_HOME", raising=False)
    monkeypatch.delenv("AGENTWAIT_CONFIG", raising=False)
    yield tmp_path

    # Drop file handlers pointing into this tmp dir
    logger = logging.getLogger("agentwait")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


@pytest.fixture
def state_dir(tmp_home):
    """
    The ~/.agentwait directory inside the mocked home.

    Yields:
        Path: State directory (created)
    """
    path = tmp_home / ".agentwait"
    path.mkdir(parents=True, exist_ok=True)
    yield path


@pytest.fixture
def config_file(state_dir):
    """
    Write a config file and return a helper to rewrite it.

    Yields:
        Callable[..., Path]: write(**fields) -> path to config.json
    """
    path = state_dir / "config.json"

    def write(**fields):
        path.write_text(json.dumps(fields))
        return path

    yield write


@pytest.fixture
def ledger_path(state_dir):
    """
    Path of the cooldown ledger inside the mocked home.

    Yields:
        Path: Path to cooldown.json (not created)
    """
    yield state_dir / "cooldown.json"


@pytest.fixture
def tmp_settings(tmp_home):
    """
    Temporary Claude settings.json file in mocked home.

    Yields:
        Path: Path to temporary settings.json
    """
    claude_dir = tmp_home / ".claude"
    claude_dir.mkdir(parents=True, exist_ok=True)
    settings_path = claude_dir / "settings.json"
    settings_path.write_text(json.dumps({}))
    yield settings_path


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A FakeClock starting at t=1000s."""
    return FakeClock()
