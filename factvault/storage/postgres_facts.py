"""Postgres-backed fact store used by the ingestion worker.

Plain psycopg + SQL. Near-duplicate detection runs against the generated
`search_tsv` column; the advisory lock makes check + insert atomic across
threads and worker processes sharing the database.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import psycopg

from factvault.ingestion.fact_types import CandidateFact
from factvault.storage.fact_store import SIMILARITY_PREFIX_CHARS, FactStore, FactStoreError


# pg_advisory_lock key; any stable bigint works as long as every writer agrees
DEDUPE_LOCK_KEY = 0x66616374


def phrase_probe(prefix: str) -> str:
    """Drop a trailing word fragment so the phrase query is made of whole words."""
    probe = (prefix or "").strip()
    if len(prefix or "") >= SIMILARITY_PREFIX_CHARS and " " in probe and not probe.endswith((" ", ".", ",", ";", ":", "!", "?")):
        probe = probe.rsplit(" ", 1)[0]
    return probe


class PostgresFactRepo(FactStore):
    def __init__(self, pg_dsn: str):
        self.pg_dsn = pg_dsn

    @contextmanager
    def dedupe_lock(self) -> Iterator[None]:
        conn = None
        try:
            conn = psycopg.connect(self.pg_dsn, autocommit=True)
            conn.execute("SELECT pg_advisory_lock(%s)", (DEDUPE_LOCK_KEY,))
        except psycopg.Error as e:
            if conn is not None:
                conn.close()
            raise FactStoreError(f"could not take dedupe lock: {e}") from e
        try:
            yield
        finally:
            # closing the session releases its advisory locks
            conn.close()

    def has_similar_text(self, prefix: str) -> bool:
        # Exact-prefix comparison covers probes that are all stopwords (empty tsquery).
        try:
            with psycopg.connect(self.pg_dsn) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT 1
                        FROM facts
                        WHERE search_tsv @@ phraseto_tsquery('english', %s)
                           OR left(text, %s) = %s
                        LIMIT 1
                        """,
                        (phrase_probe(prefix), len(prefix), prefix),
                    )
                    return cur.fetchone() is not None
        except psycopg.Error as e:
            raise FactStoreError(f"duplicate check failed: {e}") from e

    def create(self, fact: CandidateFact) -> str:
        try:
            with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO facts (
                          fact_id, text, category, source, source_url, image_url,
                          engagement, verified, created_at
                        )
                        VALUES (
                          %(fact_id)s, %(text)s, %(category)s, %(source)s, %(source_url)s, %(image_url)s,
                          %(engagement)s, %(verified)s, %(created_at)s
                        )
                        RETURNING fact_id
                        """,
                        {
                            "fact_id": fact.fact_id,
                            "text": fact.text,
                            "category": fact.category,
                            "source": fact.source,
                            "source_url": fact.source_url,
                            "image_url": fact.image_url,
                            "engagement": int(fact.engagement),
                            "verified": bool(fact.verified),
                            "created_at": fact.created_at,
                        },
                    )
                    return str(cur.fetchone()[0])
        except psycopg.Error as e:
            raise FactStoreError(f"insert failed for {fact.fact_id}: {e}") from e
