"""Storage contract the ingestion pipeline writes through."""

from __future__ import annotations

from contextlib import AbstractContextManager

from factvault.ingestion.fact_types import CandidateFact


# Facts sharing this many leading characters count as duplicates.
SIMILARITY_PREFIX_CHARS = 50


class FactStoreError(Exception):
    """Storage failure for a single fact operation"""
    pass


class FactStore:
    """Append-only fact storage.

    The pipeline only ever asks whether similar text exists and inserts new
    rows; listing, paging and updates belong to the read side.
    """

    def dedupe_lock(self) -> AbstractContextManager:
        """Mutual exclusion around one duplicate-check + create sequence."""
        raise NotImplementedError

    def has_similar_text(self, prefix: str) -> bool:
        raise NotImplementedError

    def create(self, fact: CandidateFact) -> str:
        """Insert `fact`; return its fact_id."""
        raise NotImplementedError
