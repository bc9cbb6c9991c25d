"""Fact source registry.

Order here is the order a pass visits sources in.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from factvault.ingestion.fact_types import FactSource, SourceKind
from factvault.ingestion.parsers import (
    parse_apod,
    parse_fact_list,
    parse_feed_entries,
    parse_history_events,
    parse_reddit_listing,
    parse_scraped_headlines,
)


def default_fact_sources(nasa_api_key: str = "DEMO_KEY") -> List[FactSource]:
    """Curated starter source set."""
    return [
        FactSource(
            name="Reddit r/TodayILearned",
            kind=SourceKind.STRUCTURED_API,
            url="https://www.reddit.com/r/todayilearned/top.json?limit=10&t=day",
            category="mixed",
            parser=parse_reddit_listing,
            verified=False,
        ),
        FactSource(
            name="NASA Astronomy Picture of the Day",
            kind=SourceKind.STRUCTURED_API,
            url=f"https://api.nasa.gov/planetary/apod?api_key={nasa_api_key}",
            category="space",
            parser=parse_apod,
            engagement=95,
            site_url="https://apod.nasa.gov/apod/",
        ),
        FactSource(
            name="National Geographic",
            kind=SourceKind.FEED,
            url="https://www.nationalgeographic.com/animals/article/feed/index.rss",
            category="nature",
            parser=parse_feed_entries,
            engagement=94,
            max_items=10,
            site_url="https://www.nationalgeographic.com/",
        ),
        FactSource(
            name="Science Daily",
            kind=SourceKind.SCRAPE,
            url="https://www.sciencedaily.com/releases/",
            category="science",
            parser=parse_scraped_headlines,
            engagement=90,
            selector=".latest-head",
            site_url="https://www.sciencedaily.com",
        ),
        FactSource(
            name="History Facts API",
            kind=SourceKind.STRUCTURED_API,
            url="https://history.muffinlabs.com/date",
            category="history",
            parser=parse_history_events,
        ),
        FactSource(
            name="Random Knowledge API",
            kind=SourceKind.STRUCTURED_API,
            url="https://api.aakhilv.me/fun/facts",
            category="mixed",
            parser=parse_fact_list,
        ),
    ]


def select_sources(sources: Sequence[FactSource], names: Optional[Sequence[str]] = None) -> List[FactSource]:
    """Filter by case-insensitive name, keeping registry order."""
    if not names:
        return list(sources)
    wanted = {n.strip().lower() for n in names if n and n.strip()}
    picked = [s for s in sources if s.name.lower() in wanted]
    unknown = wanted - {s.name.lower() for s in picked}
    if unknown:
        raise ValueError(f"Unknown source(s): {', '.join(sorted(unknown))}")
    return picked
