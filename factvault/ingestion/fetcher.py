"""Per-source retrieval.

Every source kind goes over the same HTTP GET; only the payload decoding and
the parser differ. A failing source is logged and contributes nothing.
"""

from __future__ import annotations

import logging
import random
from typing import Any, List, Optional

import requests

from factvault.config import DEFAULT_USER_AGENT
from factvault.ingestion.fact_types import CandidateFact, FactSource, SourceKind


logger = logging.getLogger(__name__)


def build_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    # reddit rejects the default python-requests agent
    session.headers.update({"User-Agent": user_agent})
    return session


def decode_payload(resp: requests.Response, kind: SourceKind) -> Any:
    if kind == SourceKind.STRUCTURED_API:
        return resp.json()
    if kind == SourceKind.FEED:
        # feedparser sniffs the encoding itself
        return resp.content
    return resp.text


def fetch_source(
    source: FactSource,
    *,
    session: Optional[requests.Session] = None,
    timeout: int = 30,
    rng: Optional[random.Random] = None,
) -> List[CandidateFact]:
    owns_session = session is None
    sess = build_session() if owns_session else session
    logger.info(f"Fetching facts from {source.name}...")
    try:
        resp = sess.get(source.url, timeout=timeout)
        resp.raise_for_status()
        payload = decode_payload(resp, source.kind)
        facts = source.parser(payload, source, rng)
    except Exception as e:
        logger.error(f"Error fetching from {source.name}: {e}")
        return []
    finally:
        if owns_session:
            sess.close()
    logger.info(f"{source.name}: parsed {len(facts)} candidate facts")
    return facts
