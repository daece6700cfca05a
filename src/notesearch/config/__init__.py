"""Configuration layer."""

from notesearch.config.settings import Settings

__all__ = ["Settings"]
