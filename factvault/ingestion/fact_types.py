"""Shared ingestion data types."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, List, Optional


# Closed category set; the facts table CHECK constraint mirrors it.
CATEGORIES = (
    "science",
    "history",
    "tech",
    "space",
    "psychology",
    "nature",
    "art",
    "food",
    "mixed",
)
FALLBACK_CATEGORY = "mixed"


class SourceKind(str, Enum):
    STRUCTURED_API = "structured-api"
    FEED = "feed"
    SCRAPE = "scrape"


def _new_fact_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CandidateFact:
    """Normalized fact produced by a source parser, not yet persisted.

    `fact_id` and `created_at` are stamped when the parser builds the record.
    """

    text: str
    category: str
    source: str
    engagement: int
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    verified: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    fact_id: str = field(default_factory=_new_fact_id)


# (payload, source, rng) -> candidates
FactParser = Callable[[Any, "FactSource", Any], List[CandidateFact]]


@dataclass(frozen=True)
class FactSource:
    """Static description of one external origin and how to parse it."""

    name: str
    kind: SourceKind
    url: str
    category: str
    parser: FactParser
    # Fixed score for sources that carry no popularity signal.
    engagement: Optional[int] = None
    max_items: int = 5
    selector: Optional[str] = None
    verified: bool = True
    site_url: Optional[str] = None
