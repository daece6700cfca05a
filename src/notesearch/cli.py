"""CLI entry point for the notesearch demo."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from notesearch.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point: run the document API demo against the engine."""
    parser = argparse.ArgumentParser(
        prog="notesearch",
        description="notesearch — Document API walkthrough for a search engine",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        action="append",
        default=None,
        help="Engine node URL (repeatable, overrides config)",
    )
    parser.add_argument(
        "--index",
        type=str,
        default=None,
        help="Collection name (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"notesearch {_get_version()}",
    )

    args = parser.parse_args(argv)

    # Load settings
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.host:
        settings.engine.hosts = args.host
    if args.index:
        settings.engine.index = args.index
    if args.log_level:
        settings.observability.log_level = args.log_level

    from notesearch.observability.logging import setup_logging

    setup_logging(settings.observability)

    from notesearch.store.exceptions import StoreError

    try:
        asyncio.run(_run(settings))
    except StoreError as e:
        logger.error("Demo aborted: %s", e)
        sys.exit(1)


async def _run(settings: Settings) -> None:
    from notesearch.demo import run_demo
    from notesearch.store.client import NoteStore

    async with NoteStore.from_settings(settings) as store:
        health = await store.health_check()
        logger.info("Engine health: %s (%s, %d ms)", health.status, health.message, health.latency_ms)
        await run_demo(store, refresh_wait=settings.bulk.refresh_wait)


def _get_version() -> str:
    """Get the package version."""
    try:
        from notesearch import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
