"""Shared test fixtures for live scoring engine tests."""

from __future__ import annotations

import pytest

from livescore.engine.lifecycle import MatchLifecycle
from livescore.storage.match_store import InMemoryStorage


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def match(storage: InMemoryStorage) -> MatchLifecycle:
    """T20 match in progress: Ali on strike, Ben non-striker, Sam bowling."""
    lifecycle = MatchLifecycle(storage=storage)
    result = lifecycle.start_match("Thunder", "Strikers", 20, "Ali", "Ben", "Sam")
    assert result.ok
    return lifecycle


@pytest.fixture
def short_match(storage: InMemoryStorage) -> MatchLifecycle:
    """One-over match for innings and completion tests."""
    lifecycle = MatchLifecycle(storage=storage)
    lifecycle.start_match("Thunder", "Strikers", 1, "Ali", "Ben", "Sam")
    return lifecycle

