"""Source parsers: raw payload -> CandidateFact list.

One parser per source shape. Every parser has the same signature,
`parser(payload, source, rng)`, so the fetcher can stay shape-agnostic:
- parse_reddit_listing: ranked community posts (vote + comment signals)
- parse_apod: one curated item with a long explanation
- parse_scraped_headlines: HTML page, CSS-selected headline blocks
- parse_history_events: "on this day" event list
- parse_fact_list: bare JSON list of fact strings
- parse_feed_entries: RSS/Atom feed
"""

from __future__ import annotations

import random
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import feedparser
from bs4 import BeautifulSoup

from factvault.ingestion.fact_types import CandidateFact, FactSource
from factvault.scoring.category import classify_text
from factvault.scoring.engagement import baseline_score, clamp_engagement, engagement_score


REDDIT_MIN_SCORE = 1000
REDDIT_BASE_URL = "https://reddit.com"
APOD_MAX_SENTENCES = 3

_TIL_PREFIX = re.compile(r"^TIL\s+(?:that\s+)?", re.IGNORECASE)
_WS = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return _WS.sub(" ", str(value)).strip()


def _fixed_engagement(source: FactSource, default: int) -> int:
    return clamp_engagement(source.engagement if source.engagement is not None else default)


def strip_til_prefix(title: str) -> str:
    return _TIL_PREFIX.sub("", title or "", count=1).strip()


def first_sentences(text: str, limit: int = APOD_MAX_SENTENCES) -> str:
    """First `limit` period-delimited sentences, re-terminated with a period."""
    text = (text or "").strip()
    if not text:
        return ""
    parts = text.split(".")
    if not parts[-1].strip():
        parts = parts[:-1]
    return ".".join(parts[:limit]) + "."


def parse_reddit_listing(payload: Dict[str, Any], source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    children = payload["data"]["children"]
    out: List[CandidateFact] = []
    for child in children:
        post = child.get("data") if isinstance(child, dict) else None
        if not isinstance(post, dict):
            continue
        try:
            score = int(post.get("score") or 0)
            comments = int(post.get("num_comments") or 0)
        except (TypeError, ValueError):
            continue
        if score <= REDDIT_MIN_SCORE:
            continue
        title = strip_til_prefix(_clean_text(post.get("title")))
        if not title:
            continue
        permalink = post.get("permalink")
        out.append(
            CandidateFact(
                text=title,
                category=classify_text(title),
                source=source.name,
                source_url=urljoin(REDDIT_BASE_URL, permalink) if permalink else None,
                engagement=engagement_score(score, comments, rng=rng),
                verified=False,
            )
        )
    return out


def parse_apod(payload: Dict[str, Any], source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    text = first_sentences(payload.get("explanation") or "")
    if not text:
        return []
    return [
        CandidateFact(
            text=text,
            category=source.category,
            source=source.name,
            source_url=source.site_url,
            image_url=payload.get("url") or None,
            engagement=_fixed_engagement(source, 95),
            verified=source.verified,
        )
    ]


def parse_scraped_headlines(html: str, source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    if not source.selector:
        raise ValueError(f"scrape source {source.name!r} has no selector")
    soup = BeautifulSoup(html or "", "html.parser")
    base = source.site_url or source.url
    out: List[CandidateFact] = []
    for node in soup.select(source.selector):
        text = _node_text(node)
        if not text:
            continue
        anchor = node.find("a", href=True)
        out.append(
            CandidateFact(
                text=text,
                category=source.category,
                source=source.name,
                source_url=urljoin(base, anchor["href"]) if anchor else None,
                engagement=_fixed_engagement(source, 90),
                verified=source.verified,
            )
        )
        if len(out) >= source.max_items:
            break
    return out


def parse_history_events(payload: Dict[str, Any], source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    events = (payload.get("data") or {}).get("Events") or []
    out: List[CandidateFact] = []
    for event in events[: source.max_items]:
        if not isinstance(event, dict):
            continue
        year = _clean_text(event.get("year"))
        description = _clean_text(event.get("text"))
        if not year or not description:
            continue
        out.append(
            CandidateFact(
                text=f"On this day in {year}: {description}",
                category=source.category,
                source=source.name,
                source_url=source.site_url,
                engagement=baseline_score(85, 10, rng=rng),
                verified=source.verified,
            )
        )
    return out


def parse_fact_list(payload: Any, source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    if not isinstance(payload, list):
        return []
    out: List[CandidateFact] = []
    for item in payload:
        if not isinstance(item, str):
            continue
        text = _clean_text(item)
        if not text:
            continue
        out.append(
            CandidateFact(
                text=text,
                category=classify_text(text),
                source=source.name,
                source_url=source.site_url,
                engagement=baseline_score(80, 15, rng=rng),
                verified=source.verified,
            )
        )
    return out


def _node_text(node: Any) -> str:
    # a space separator keeps block elements apart but also lands before inline punctuation
    return _SPACE_BEFORE_PUNCT.sub(r"\1", _clean_text(node.get_text(" ", strip=True)))


def _html_to_text(fragment: Optional[str]) -> str:
    if not fragment:
        return ""
    return _node_text(BeautifulSoup(fragment, "html.parser"))


def _entry_image(entry: Any) -> Optional[str]:
    for media in entry.get("media_content") or entry.get("media_thumbnail") or []:
        url = media.get("url")
        if url:
            return url
    for link in entry.get("links") or []:
        if link.get("rel") == "enclosure" and str(link.get("type") or "").startswith("image/"):
            return link.get("href")
    return None


def parse_feed_entries(payload: Any, source: FactSource, rng: Optional[random.Random] = None) -> List[CandidateFact]:
    parsed = feedparser.parse(payload)
    # bozo is set for recoverable quirks too; only give up when nothing parsed
    if parsed.bozo and not parsed.entries:
        raise ValueError(f"unparseable feed: {parsed.get('bozo_exception')}")
    out: List[CandidateFact] = []
    for entry in parsed.entries[: source.max_items]:
        text = _html_to_text(entry.get("summary")) or _clean_text(entry.get("title"))
        if not text:
            continue
        out.append(
            CandidateFact(
                text=text,
                category=source.category,
                source=source.name,
                source_url=entry.get("link") or source.site_url,
                image_url=_entry_image(entry),
                engagement=_fixed_engagement(source, 94),
                verified=source.verified,
            )
        )
    return out
