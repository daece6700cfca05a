"""Tests for logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from notesearch.config.settings import ObservabilitySettings
from notesearch.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_level_applied(self) -> None:
        setup_logging(ObservabilitySettings(log_level="warning"))
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("opensearch").level == logging.WARNING

    def test_json_renders_stdlib_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_level="info", log_format="json"))
        logging.getLogger("notesearch.store.client").info("GET RESPONSE: %s", {"found": True})
        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "GET RESPONSE: {'found': True}"
        assert record["level"] == "info"
        assert record["logger"] == "notesearch.store.client"
