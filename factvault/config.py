"""Environment-driven settings and logging setup for the fact ingestion worker."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv


DEFAULT_PG_DSN = "dbname=factvault user=factvault password=factvault host=localhost port=5432"
DEFAULT_USER_AGENT = "FactVault/1.0"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

STORE_BACKENDS = ("postgres", "memory")
INGEST_MODES = ("once", "scheduled")


@dataclass
class Settings:
    """Configuration class with validation"""

    pg_dsn: str = DEFAULT_PG_DSN
    fact_store: str = "postgres"

    # NASA only hands out rate-limited DEMO_KEY access without a real key
    nasa_api_key: str = "DEMO_KEY"

    fetch_interval_hours: int = 3
    request_timeout: int = 30  # seconds
    fetch_workers: int = 1
    user_agent: str = DEFAULT_USER_AGENT

    log_level: str = "INFO"
    log_file: Optional[str] = None

    ingest_mode: str = "once"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load and validate settings from environment variables (and .env)."""
        load_dotenv()
        settings = cls(
            pg_dsn=os.getenv("PG_DSN", DEFAULT_PG_DSN),
            fact_store=os.getenv("FACT_STORE", "postgres").lower().strip(),
            nasa_api_key=os.getenv("NASA_API_KEY", "").strip() or "DEMO_KEY",
            fetch_interval_hours=int(os.getenv("FETCH_INTERVAL_HOURS", "3")),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "30")),
            fetch_workers=int(os.getenv("FETCH_WORKERS", "1")),
            user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper().strip(),
            log_file=os.getenv("LOG_FILE", "").strip() or None,
            ingest_mode=os.getenv("INGEST_MODE", "once").lower().strip(),
        )
        settings._validate()
        return settings

    def _validate(self) -> None:
        errors: List[str] = []

        if self.fact_store not in STORE_BACKENDS:
            errors.append(f"FACT_STORE must be one of {', '.join(STORE_BACKENDS)}")
        if self.fact_store == "postgres" and not self.pg_dsn.strip():
            errors.append("PG_DSN is required when FACT_STORE=postgres")

        if self.fetch_interval_hours < 1 or self.fetch_interval_hours > 24:
            errors.append("FETCH_INTERVAL_HOURS should be between 1 and 24")
        if self.request_timeout < 5 or self.request_timeout > 300:
            errors.append("REQUEST_TIMEOUT should be between 5 and 300 seconds")
        if self.fetch_workers < 1 or self.fetch_workers > 8:
            errors.append("FETCH_WORKERS should be between 1 and 8")

        if self.ingest_mode not in INGEST_MODES:
            errors.append(f"INGEST_MODE must be one of {', '.join(INGEST_MODES)}")
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ValueError(error_msg)


def configure_logging(settings: Settings) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, handlers=handlers)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
