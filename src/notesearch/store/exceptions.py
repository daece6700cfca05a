"""Store-specific exceptions."""


class StoreError(Exception):
    """Base exception for note store errors."""


class ConnectionError(StoreError):
    """Raised when the store cannot reach the search engine."""


class NoteNotFoundError(StoreError):
    """Raised when a note does not exist in the collection."""


class OperationError(StoreError):
    """Raised when a document request fails."""


class ConfigurationError(StoreError):
    """Raised when store configuration is invalid."""
