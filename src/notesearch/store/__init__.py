"""Note store — Document operations against the search engine's ``notes`` collection."""

from notesearch.store.client import IndexListener, NoteStore, StoreHealth

__all__ = ["IndexListener", "NoteStore", "StoreHealth"]
