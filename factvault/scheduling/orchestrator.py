"""Fact ingestion orchestrator.

Owns everything about when passes run: one pass at start-up, then one every
`interval_hours` on a private `schedule.Scheduler`. Passes are serialized by a
lock, so a trigger that fires mid-pass waits for the running pass to finish
instead of racing it on the duplicate check.
"""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import requests
import schedule

from factvault.ingestion.fact_types import FactSource
from factvault.ingestion.fetcher import build_session, fetch_source
from factvault.ingestion.persist import FetchStats, store_facts
from factvault.storage.fact_store import FactStore


logger = logging.getLogger(__name__)


class FactOrchestrator:
    def __init__(
        self,
        sources: Sequence[FactSource],
        store: FactStore,
        *,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        interval_hours: int = 3,
        timeout: int = 30,
        max_workers: int = 1,
        poll_seconds: float = 30.0,
    ):
        self.sources: List[FactSource] = list(sources)
        self.store = store
        self.session = session or build_session()
        self.rng = rng
        self.interval_hours = interval_hours
        self.timeout = timeout
        self.max_workers = max(1, int(max_workers))
        self.poll_seconds = poll_seconds

        self.last_stats: Optional[FetchStats] = None
        self.last_run_at: Optional[datetime] = None

        self._scheduler = schedule.Scheduler()
        self._pass_lock = threading.Lock()
        self._running = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        """True while a pass is in progress."""
        return self._running

    def _run_source(self, source: FactSource) -> FetchStats:
        try:
            facts = fetch_source(source, session=self.session, timeout=self.timeout, rng=self.rng)
            return store_facts(facts, self.store)
        except Exception as e:
            logger.error(f"Unexpected error processing {source.name}: {e}", exc_info=True)
            return FetchStats()

    def run_pass(self) -> FetchStats:
        """Fetch, dedupe and store every source once; return the merged stats."""
        with self._pass_lock:
            self._running = True
            try:
                logger.info(f"Starting fact fetch over {len(self.sources)} sources...")
                if self.max_workers > 1 and len(self.sources) > 1:
                    with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="fact-source") as pool:
                        per_source = list(pool.map(self._run_source, self.sources))
                else:
                    per_source = [self._run_source(s) for s in self.sources]

                totals = FetchStats()
                for stats in per_source:
                    totals.merge(stats)
                self.last_stats = totals
                self.last_run_at = datetime.now(timezone.utc)
                logger.info(f"Fact fetch completed. Stats: total={totals.total} by_category={totals.by_category}")
                return totals
            finally:
                self._running = False

    def run_forever(self) -> None:
        """Run a pass now, then on the fixed cadence until stop() is called."""
        self._scheduler.clear()
        self._scheduler.every(self.interval_hours).hours.do(self.run_pass)
        logger.info(f"Fact fetcher initialized (every {self.interval_hours}h)")

        self.run_pass()
        while not self._stop.is_set():
            self._scheduler.run_pending()
            self._stop.wait(self.poll_seconds)
        self._scheduler.clear()
        logger.info("Fact fetcher stopped")

    def start(self) -> None:
        """Run the schedule on a background thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("orchestrator already started")
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="fact-orchestrator", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def next_run(self) -> Optional[datetime]:
        return self._scheduler.next_run
