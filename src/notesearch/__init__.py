"""notesearch — Document API walkthrough for a search engine's ``notes`` collection."""

__version__ = "0.1.0"
