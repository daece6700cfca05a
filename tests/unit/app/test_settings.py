"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from notesearch.config.settings import EngineSettings, Settings


class TestSettings:
    def test_defaults(self, settings: Settings) -> None:
        assert settings.engine.hosts == ["http://localhost:9200"]
        assert settings.engine.index == "notes"
        assert settings.bulk.chunk_size == 500
        assert settings.bulk.refresh_wait == 1.0
        assert settings.observability.log_level == "info"
        assert set(Settings.model_fields) == {"engine", "bulk", "observability"}

    def test_hosts_from_json_string(self) -> None:
        assert EngineSettings(hosts='["http://a:9200", "http://b:9200"]').hosts == [  # type: ignore[arg-type]
            "http://a:9200",
            "http://b:9200",
        ]

    def test_hosts_from_plain_string(self) -> None:
        assert EngineSettings(hosts="http://a:9200").hosts == ["http://a:9200"]  # type: ignore[arg-type]

    def test_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTESEARCH_ENGINE__INDEX", "scratch")
        monkeypatch.setenv("NOTESEARCH_BULK__REFRESH_WAIT", "2.5")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.engine.index == "scratch"
        assert s.bulk.refresh_wait == 2.5

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("engine:\n  hosts:\n    - http://search:9200\n  username: elastic\nobservability:\n  log_format: json\n")
        s = Settings.from_yaml(path)
        assert s.engine.hosts == ["http://search:9200"]
        assert s.engine.username == "elastic"
        assert s.observability.log_format == "json"

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "nope.yaml")
