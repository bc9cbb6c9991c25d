"""Validate, dedupe and append candidate facts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

from factvault.ingestion.fact_types import CandidateFact
from factvault.storage.fact_store import SIMILARITY_PREFIX_CHARS, FactStore, FactStoreError


logger = logging.getLogger(__name__)

# Exclusive bounds on accepted text length.
MIN_TEXT_CHARS = 20
MAX_TEXT_CHARS = 500


@dataclass
class FetchStats:
    """Newly stored facts for one source or one pass."""

    total: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)

    def record(self, category: str) -> None:
        self.total += 1
        self.by_category[category] = self.by_category.get(category, 0) + 1

    def merge(self, other: "FetchStats") -> None:
        self.total += other.total
        for category, count in other.by_category.items():
            self.by_category[category] = self.by_category.get(category, 0) + count


def is_valid_length(text: str) -> bool:
    return MIN_TEXT_CHARS < len(text or "") < MAX_TEXT_CHARS


def store_facts(candidates: Iterable[CandidateFact], store: FactStore) -> FetchStats:
    """Append each acceptable, non-duplicate candidate; candidates are independent.

    Length and duplicate rejections are silent. A storage error on one fact is
    logged and the loop moves on.
    """
    stats = FetchStats()
    for fact in candidates:
        if not is_valid_length(fact.text):
            continue
        try:
            with store.dedupe_lock():
                if store.has_similar_text(fact.text[:SIMILARITY_PREFIX_CHARS]):
                    continue
                fact_id = store.create(fact)
        except FactStoreError as e:
            logger.error(f"Error processing fact {fact.fact_id} from {fact.source}: {e}")
            continue
        stats.record(fact.category)
        logger.info(f"New fact added: {fact_id} [{fact.category}]")
    return stats
