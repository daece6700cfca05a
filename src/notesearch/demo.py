"""Demo sequence — Walks the notes collection through every document API once.

The store logs each raw engine response; this module prints the values the
operations return so the run reads as a transcript.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from notesearch.store.client import IndexListener, NoteStore

logger = logging.getLogger(__name__)

BULK_NOTES: dict[str, str] = {
    "4": "BulK item!",
    "5": "Another bulK item!",
    "6": "One more bulK item!",
}


async def run_demo(
    store: NoteStore,
    *,
    refresh_wait: float = 1.0,
    echo: Callable[[Any], None] = print,
) -> None:
    """Run the fixed sequence of document operations against *store*.

    Any failure of a direct call propagates and ends the run.  The async
    index reports failure through its listener only.

    Args:
        store: An initialized note store.
        refresh_wait: Seconds to wait after the bulk request before searching.
        echo: Sink for the returned values (stdout by default).
    """
    await store.index("1", "Hello!")

    listener = IndexListener()
    store.index_async("2", "Hi async!", listener)
    await listener.wait()

    echo(await store.get("1"))
    echo(await store.get_source("1"))
    echo(await store.exists("1"))
    await store.delete("1")
    echo(await store.exists("1"))

    await store.update("2", "Hi updated!")
    echo(await store.get("2"))

    await store.upsert("3", "Hi upserted!")
    echo(await store.get("3"))
    await store.upsert("3", "Hi upserted new!")
    echo(await store.get("3"))

    echo(await store.search_all())

    report = await store.bulk_index(BULK_NOTES)
    if not report.ok:
        logger.warning("Bulk finished with %d failed item(s)", len(report.failed))
    await asyncio.sleep(refresh_wait)
    echo(await store.search_all())

    echo("OK!")
