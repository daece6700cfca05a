"""Note document model — The single entity stored in the ``notes`` collection.

A note is ``{id, text}``.  The id is the document key inside the collection
and the text is the only field of the stored source.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Note(BaseModel):
    """A note document."""

    id: str = Field(description="Unique document identifier within the collection")
    text: str = Field(description="Note text")

    def source(self) -> dict[str, Any]:
        """Return the document body sent to the engine."""
        return {"text": self.text}


class BulkFailure(BaseModel):
    """A single item that failed inside a bulk request."""

    id: str = Field(description="Document id of the failed item")
    cause: str = Field(description="Error reported by the engine or transport")
    status: int | str | None = Field(default=None, description="HTTP status of the item ('N/A' on transport errors)")


class BulkReport(BaseModel):
    """Outcome of a bulk index request, split per item."""

    succeeded: list[str] = Field(default_factory=list, description="Ids indexed successfully")
    failed: list[BulkFailure] = Field(default_factory=list, description="Items that failed")

    @property
    def failed_ids(self) -> list[str]:
        return [f.id for f in self.failed]

    @property
    def ok(self) -> bool:
        return not self.failed
