"""Integration test fixtures — A live engine on localhost:9200.

Expects a single-node Elasticsearch or OpenSearch to be running, e.g.::

    docker run -p 9200:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Each test module gets a fresh scratch collection that is dropped afterwards.
"""

from __future__ import annotations

import time
import uuid

import httpx
import pytest

from notesearch.store.client import NoteStore

ENGINE_URL = "http://localhost:9200"


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def engine_ready() -> str:
    """Ensure the engine is reachable."""
    if not _wait_for_service(ENGINE_URL):
        pytest.skip(f"Search engine not available at {ENGINE_URL}")
    return ENGINE_URL


@pytest.fixture
def collection(engine_ready: str):
    """A scratch collection name, deleted after the test."""
    name = f"notes-test-{uuid.uuid4().hex[:8]}"
    yield name
    httpx.delete(f"{engine_ready}/{name}", params={"ignore_unavailable": "true"}, timeout=30)


@pytest.fixture
async def store(engine_ready: str, collection: str):
    s = NoteStore(hosts=[engine_ready], index=collection)
    await s.initialize()
    yield s
    await s.shutdown()
