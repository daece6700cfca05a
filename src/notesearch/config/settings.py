"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (NOTESEARCH_ prefix) and .env
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class EngineSettings(BaseModel):
    """Search engine connection and collection."""

    hosts: list[str] = Field(default=["http://localhost:9200"], description="Engine node URLs")
    index: str = Field(default="notes", description="Collection (index) holding the notes")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra client keyword arguments")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class BulkSettings(BaseModel):
    """Bulk indexing behaviour.

    ``chunk_size`` and ``max_chunk_bytes`` default to the client library's
    own bulk helper defaults.
    """

    chunk_size: int = Field(default=500, description="Documents per bulk request")
    max_chunk_bytes: int = Field(default=100 * 1024 * 1024, description="Maximum bulk request size in bytes")
    refresh_wait: float = Field(default=1.0, description="Seconds to wait for the refresh interval after a bulk")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="console", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the NOTESEARCH_ prefix.
    Nested settings use double underscores: NOTESEARCH_ENGINE__INDEX=notes

    Example:
        NOTESEARCH_ENGINE__HOSTS='["http://search:9200"]'
        NOTESEARCH_BULK__REFRESH_WAIT=2
        NOTESEARCH_OBSERVABILITY__LOG_FORMAT=json
    """

    model_config = {
        "env_prefix": "NOTESEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    engine: EngineSettings = Field(default_factory=EngineSettings)
    bulk: BulkSettings = Field(default_factory=BulkSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file override environment variables; keys the
        file leaves out still fall back to the environment, then defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
