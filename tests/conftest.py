"""Top-level pytest configuration for sourced."""

import os

import pytest

from sourced.domain import AggregateRoot

# Configure asyncio to be less verbose
os.environ["PYTHONASYNCIODEBUG"] = "0"

pytest_plugins = [
    "pytest_asyncio",
]

SETTINGS_PREFIXES = ("SOURCED_CHECK_", "SOURCED_LOGGING_")


@pytest.fixture(autouse=True)
def clear_sourced_env(monkeypatch):
    """Keep settings from the developer's environment out of the tests."""
    for key in list(os.environ):
        if key.startswith(SETTINGS_PREFIXES):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def aggregate() -> AggregateRoot:
    """A bare aggregate with no handlers."""
    return AggregateRoot()
