#!/usr/bin/env python3
"""Fact ingestion worker.

Runs one ingestion pass (manual trigger) or the scheduled loop over:
- Reddit r/TodayILearned (ranked community posts)
- NASA APOD (curated daily item)
- National Geographic (RSS)
- Science Daily (scraped headlines)
- History "on this day" events
- Random fact list API

Stores new, deduplicated facts in Postgres (or in memory for dry runs).
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from factvault.config import INGEST_MODES, Settings, configure_logging
from factvault.ingestion.fetcher import build_session
from factvault.ingestion.sources import default_fact_sources, select_sources
from factvault.scheduling.orchestrator import FactOrchestrator
from factvault.scheduling.process_lock import ProcessLock
from factvault.storage.fact_store import FactStore
from factvault.storage.memory_facts import MemoryFactStore
from factvault.storage.postgres_facts import PostgresFactRepo
from factvault.storage.postgres_schema import ensure_postgres_schema


LOCK_FILE = "state/fact_ingest.lock"

logger = logging.getLogger("fact_ingest_worker")


def build_store(settings: Settings) -> FactStore:
    if settings.fact_store == "memory":
        logger.warning("FACT_STORE=memory: facts are not persisted")
        return MemoryFactStore()
    ensure_postgres_schema(settings.pg_dsn)
    return PostgresFactRepo(settings.pg_dsn)


def build_orchestrator(settings: Settings, source_names: Optional[List[str]] = None) -> FactOrchestrator:
    sources = select_sources(default_fact_sources(settings.nasa_api_key), source_names)
    return FactOrchestrator(
        sources,
        build_store(settings),
        session=build_session(settings.user_agent),
        interval_hours=settings.fetch_interval_hours,
        timeout=settings.request_timeout,
        max_workers=settings.fetch_workers,
    )


def run_once(settings: Settings, source_names: Optional[List[str]] = None) -> int:
    stats = build_orchestrator(settings, source_names).run_pass()
    print(f"[ingest] new_facts={stats.total} by_category={stats.by_category}")
    return 0


def run_scheduled(settings: Settings, source_names: Optional[List[str]] = None) -> int:
    process_lock = ProcessLock(LOCK_FILE)
    if not process_lock.acquire():
        logger.error("Another instance of the fact worker is already running. Exiting.")
        return 1
    try:
        orchestrator = build_orchestrator(settings, source_names)

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, initiating graceful shutdown...")
            orchestrator.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)
        orchestrator.run_forever()
    finally:
        process_lock.release()
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Harvest facts from the configured sources.")
    parser.add_argument("--mode", choices=INGEST_MODES, help="override INGEST_MODE")
    parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="NAME",
        help="restrict the pass to this source (repeatable)",
    )
    parser.add_argument("--list-sources", action="store_true", help="print the source registry and exit")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Configuration error:\n{e}", file=sys.stderr)
        return 1
    configure_logging(settings)

    if args.list_sources:
        for s in default_fact_sources(settings.nasa_api_key):
            print(f"{s.name}\t{s.kind.value}\t{s.category}")
        return 0

    try:
        mode = args.mode or settings.ingest_mode
        if mode == "scheduled":
            return run_scheduled(settings, args.sources)
        return run_once(settings, args.sources)
    except ValueError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
