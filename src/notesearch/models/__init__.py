"""Data models for notes and bulk results."""

from notesearch.models.note import BulkFailure, BulkReport, Note

__all__ = ["BulkFailure", "BulkReport", "Note"]
