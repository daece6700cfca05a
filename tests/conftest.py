"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from notesearch.config.settings import Settings
from notesearch.store.client import NoteStore


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def mock_client() -> MagicMock:
    """An ``AsyncOpenSearch`` stand-in with awaitable document APIs."""
    client = MagicMock()
    for name in ("info", "index", "get", "get_source", "exists", "delete", "update", "search", "close"):
        setattr(client, name, AsyncMock())
    client.indices = MagicMock()
    client.indices.refresh = AsyncMock()
    client.cluster = MagicMock()
    client.cluster.health = AsyncMock()
    return client


@pytest.fixture
def store(mock_client: MagicMock) -> NoteStore:
    """A store wired to ``mock_client`` without connecting."""
    s = NoteStore(hosts=["http://localhost:9200"], index="notes")
    s._client = mock_client
    return s

