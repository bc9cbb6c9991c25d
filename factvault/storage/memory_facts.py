"""In-process fact store for dry runs (FACT_STORE=memory) and tests."""

from __future__ import annotations

import threading
from typing import Dict, List

from factvault.ingestion.fact_types import CandidateFact
from factvault.storage.fact_store import FactStore, FactStoreError


class MemoryFactStore(FactStore):
    """Keeps facts in insertion order; similarity is a case-insensitive substring test."""

    def __init__(self):
        self._lock = threading.RLock()
        self._facts: Dict[str, CandidateFact] = {}

    def dedupe_lock(self) -> threading.RLock:
        return self._lock

    def has_similar_text(self, prefix: str) -> bool:
        needle = (prefix or "").lower()
        with self._lock:
            return any(needle in f.text.lower() for f in self._facts.values())

    def create(self, fact: CandidateFact) -> str:
        with self._lock:
            if fact.fact_id in self._facts:
                raise FactStoreError(f"duplicate fact_id {fact.fact_id}")
            self._facts[fact.fact_id] = fact
        return fact.fact_id

    @property
    def facts(self) -> List[CandidateFact]:
        with self._lock:
            return list(self._facts.values())

    def __len__(self) -> int:
        return len(self._facts)
