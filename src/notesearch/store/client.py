"""Note store — Document APIs of an Elasticsearch-compatible engine for one collection.

Every operation is a single call through ``opensearch-py`` (async) to the
engine's REST document API.  Raw responses are logged as they arrive and the
value a caller cares about (source, existence flag, bulk report) is returned.

Install the client with::

    pip install "opensearch-py[async]"
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from notesearch.models.note import BulkFailure, BulkReport, Note
from notesearch.store.exceptions import (
    ConfigurationError,
    ConnectionError,
    NoteNotFoundError,
    OperationError,
)

if TYPE_CHECKING:
    from notesearch.config.settings import Settings

logger = logging.getLogger(__name__)


class StoreHealth(BaseModel):
    """Health status of the engine behind a store."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health request in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the check")
    message: str | None = Field(default=None, description="Additional health message")


class IndexListener:
    """Completion callbacks for :meth:`NoteStore.index_async`.

    Either callback marks the listener done, so a caller can ``await
    listener.wait()`` as a one-shot completion signal.  Subclass and override
    the callbacks to react differently; call ``super()`` to keep the signal.
    """

    def __init__(self) -> None:
        self._done = asyncio.Event()
        self.response: dict[str, Any] | None = None
        self.error: BaseException | None = None

    def on_response(self, response: dict[str, Any]) -> None:
        logger.info("INDEX RESPONSE: %s", response)
        self.response = response
        self._done.set()

    def on_failure(self, error: BaseException) -> None:
        logger.error("INDEX FAILURE: %s", error)
        self.error = error
        self._done.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    async def wait(self) -> None:
        """Block until the index request has completed either way."""
        await self._done.wait()


class NoteStore:
    """Document operations on the notes collection.

    Supports:
      - Single-document index, get, get-source, exists, delete
      - Partial update and upsert
      - Bulk indexing with per-item reporting
      - Match-all search
      - Fire-and-notify indexing through :class:`IndexListener`

    Args:
        hosts: List of engine node URLs.
        index: Collection holding the notes.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        chunk_size: Documents per bulk request.
        max_chunk_bytes: Maximum bulk request size in bytes.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        index: str = "notes",
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        chunk_size: int = 500,
        max_chunk_bytes: int = 100 * 1024 * 1024,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["http://localhost:9200"]
        self._index = index
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._chunk_size = chunk_size
        self._max_chunk_bytes = max_chunk_bytes
        self._extra_kwargs = kwargs
        self._client: Any = None
        self._pending: set[asyncio.Task[Any]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> NoteStore:
        """Build a store from :class:`notesearch.config.settings.Settings`."""
        engine = settings.engine
        return cls(
            hosts=engine.hosts,
            index=engine.index,
            username=engine.username,
            password=engine.password,
            verify_certs=engine.verify_certs,
            chunk_size=settings.bulk.chunk_size,
            max_chunk_bytes=settings.bulk.max_chunk_bytes,
            **engine.extra,
        )

    @property
    def index_name(self) -> str:
        return self._index

    async def __aenter__(self) -> NoteStore:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    async def initialize(self) -> None:
        """Create and verify the ``AsyncOpenSearch`` client."""
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError(
                'opensearch-py package is required.  Install with: pip install "opensearch-py[async]"'
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)

        try:
            self._client = AsyncOpenSearch(**client_kwargs)
            info = await self._client.info()
            version = info.get("version", {}).get("number", "unknown")
            cluster = info.get("cluster_name", "unknown")
            logger.info("Connected to cluster: %s (v%s)", cluster, version)
        except Exception as e:
            if self._client is not None:
                await self._client.close()
                self._client = None
            raise ConnectionError(f"Failed to connect to {self._hosts}: {e}") from e

    async def shutdown(self) -> None:
        """Wait for in-flight async index requests, then close the client."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client:
            await self._client.close()
            self._client = None

    # ── Single documents ─────────────────────────────────────────────────

    async def index(self, note_id: str, text: str) -> dict[str, Any]:
        """Create or replace a note."""
        response = await self._index_note(Note(id=note_id, text=text))
        logger.info("INDEX RESPONSE: %s", response)
        return response

    def index_async(self, note_id: str, text: str, listener: IndexListener) -> asyncio.Task[dict[str, Any]]:
        """Schedule an index request and report its outcome to *listener*.

        Must be called from a running event loop.  Failures go to
        ``listener.on_failure`` and are not retried.
        """
        task = asyncio.ensure_future(self._index_note(Note(id=note_id, text=text)))
        self._pending.add(task)

        def _notify(done: asyncio.Task[dict[str, Any]]) -> None:
            self._pending.discard(done)
            if done.cancelled():
                listener.on_failure(asyncio.CancelledError())
            elif done.exception() is not None:
                listener.on_failure(done.exception())  # type: ignore[arg-type]
            else:
                listener.on_response(done.result())

        task.add_done_callback(_notify)
        return task

    async def get(self, note_id: str) -> dict[str, Any] | None:
        """Return the note's source, or ``None`` if it does not exist."""
        client = self._require_client()
        try:
            response = await client.get(index=self._index, id=note_id)
        except Exception as e:
            if _is_not_found(e):
                logger.info("GET RESPONSE: %s", getattr(e, "info", e))
                return None
            raise OperationError(f"Failed to get note '{note_id}': {e}") from e
        logger.info("GET RESPONSE: %s", response)
        return response.get("_source") if response.get("found") else None

    async def get_source(self, note_id: str) -> dict[str, Any]:
        """Return only the stored source of a note."""
        client = self._require_client()
        try:
            response = await client.get_source(index=self._index, id=note_id)
        except Exception as e:
            raise self._wrap(e, f"Failed to get source of note '{note_id}'", note_id) from e
        logger.info("GET SOURCE RESPONSE: %s", response)
        return dict(response)

    async def exists(self, note_id: str) -> bool:
        """Check whether a note exists."""
        client = self._require_client()
        try:
            response = bool(await client.exists(index=self._index, id=note_id))
        except Exception as e:
            raise OperationError(f"Failed to check note '{note_id}': {e}") from e
        logger.info("EXISTS RESPONSE: %s", response)
        return response

    async def delete(self, note_id: str) -> dict[str, Any]:
        """Delete a note."""
        client = self._require_client()
        try:
            response = await client.delete(index=self._index, id=note_id)
        except Exception as e:
            raise self._wrap(e, f"Failed to delete note '{note_id}'", note_id) from e
        logger.info("DELETE RESPONSE: %s", response)
        return dict(response)

    async def update(self, note_id: str, text: str) -> dict[str, Any]:
        """Replace the text of an existing note.

        Raises:
            NoteNotFoundError: If the note does not exist.
        """
        body = {"doc": Note(id=note_id, text=text).source()}
        response = await self._update(note_id, body)
        logger.info("UPDATE RESPONSE: %s", response)
        return response

    async def upsert(self, note_id: str, text: str) -> dict[str, Any]:
        """Update the note's text, creating the note if it is missing."""
        source = Note(id=note_id, text=text).source()
        response = await self._update(note_id, {"doc": source, "upsert": source})
        logger.info("UPSERT RESPONSE: %s", response)
        return response

    # ── Bulk and search ──────────────────────────────────────────────────

    async def bulk_index(self, notes: Mapping[str, str] | Iterable[Note]) -> BulkReport:
        """Index many notes in batched bulk requests.

        Item failures are collected into the report and never abort the
        batch.  A transport failure of a whole request marks every item of
        that request as failed with the transport error as cause.

        Raises:
            OperationError: If the helper fails outside a transport error.
        """
        from opensearchpy import helpers

        client = self._require_client()
        items = [Note(id=k, text=v) for k, v in notes.items()] if isinstance(notes, Mapping) else list(notes)
        actions = [{"_index": self._index, "_id": n.id, "_source": n.source()} for n in items]
        logger.info("BEFORE BULK: %d actions %s", len(actions), [n.id for n in items])

        report = BulkReport()
        try:
            async for ok, item in helpers.async_streaming_bulk(
                client,
                actions,
                chunk_size=self._chunk_size,
                max_chunk_bytes=self._max_chunk_bytes,
                raise_on_error=False,
                raise_on_exception=False,
            ):
                result = next(iter(item.values()), {})
                doc_id = str(result.get("_id", ""))
                if ok:
                    report.succeeded.append(doc_id)
                else:
                    report.failed.append(
                        BulkFailure(id=doc_id, cause=str(result.get("error", "unknown")), status=result.get("status"))
                    )
        except Exception as e:
            raise OperationError(f"Bulk index on '{self._index}' failed: {e}") from e

        logger.info("BULK SUCCEEDED: %s", report.succeeded)
        logger.info("BULK FAILED: %s", [(f.id, f.cause) for f in report.failed])
        return report

    async def search_all(self) -> list[dict[str, Any]]:
        """Return the sources of all hits of a match-all search."""
        client = self._require_client()
        try:
            response = await client.search(index=self._index)
        except Exception as e:
            raise OperationError(f"Search on '{self._index}' failed: {e}") from e
        logger.info("SEARCH RESPONSE: %s", response)
        return [hit.get("_source", {}) for hit in response.get("hits", {}).get("hits", [])]

    async def refresh(self) -> None:
        """Make recent writes visible to search."""
        client = self._require_client()
        try:
            await client.indices.refresh(index=self._index)
        except Exception as e:
            raise OperationError(f"Refresh of '{self._index}' failed: {e}") from e

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> StoreHealth:
        """Check cluster health."""
        if not self._client:
            return StoreHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return StoreHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return StoreHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> Any:
        if not self._client:
            raise ConnectionError("Engine client not initialized.")
        return self._client

    async def _index_note(self, note: Note) -> dict[str, Any]:
        client = self._require_client()
        try:
            response = await client.index(index=self._index, id=note.id, body=note.source())
        except Exception as e:
            raise OperationError(f"Failed to index note '{note.id}': {e}") from e
        return dict(response)

    async def _update(self, note_id: str, body: dict[str, Any]) -> dict[str, Any]:
        client = self._require_client()
        try:
            response = await client.update(index=self._index, id=note_id, body=body)
        except Exception as e:
            raise self._wrap(e, f"Failed to update note '{note_id}'", note_id) from e
        return dict(response)

    def _wrap(self, error: Exception, message: str, note_id: str) -> Exception:
        if _is_not_found(error):
            return NoteNotFoundError(f"Note '{note_id}' not found in '{self._index}'.")
        return OperationError(f"{message}: {error}")


def _is_not_found(error: Exception) -> bool:
    return getattr(error, "status_code", None) == 404 or "NotFoundError" in type(error).__name__
