"""Postgres schema management for FactVault.

Schema creation is idempotent (CREATE IF NOT EXISTS) so every worker start
can run it.
"""

from __future__ import annotations

from typing import Iterable, Optional

import psycopg


SCHEMA_STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS facts (
      id BIGSERIAL PRIMARY KEY,
      fact_id TEXT NOT NULL UNIQUE,
      text TEXT NOT NULL CHECK (char_length(text) > 20 AND char_length(text) < 500),
      category TEXT NOT NULL CHECK (
        category IN ('science','history','tech','space','psychology','nature','art','food','mixed')
      ),
      source TEXT NOT NULL,
      source_url TEXT,
      image_url TEXT,
      engagement SMALLINT NOT NULL CHECK (engagement BETWEEN 1 AND 100),
      verified BOOLEAN NOT NULL DEFAULT FALSE,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      search_tsv tsvector GENERATED ALWAYS AS (to_tsvector('english', coalesce(text,''))) STORED
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_facts_created_at ON facts (created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_facts_category ON facts (category);",
    "CREATE INDEX IF NOT EXISTS idx_facts_engagement ON facts (engagement DESC);",
    "CREATE INDEX IF NOT EXISTS idx_facts_search_tsv ON facts USING GIN (search_tsv);",
]


def ensure_postgres_schema(pg_dsn: str, *, statements: Optional[Iterable[str]] = None) -> None:
    """Ensure Postgres schema exists."""
    stmts = list(statements) if statements is not None else SCHEMA_STATEMENTS
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for s in stmts:
                cur.execute(s)
