"""Erasmus Journey — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    stale_sweep_minutes: int = 60
    generation_interval_minutes: int = 30

    # ── Aggregation ──
    aggregation_schema_version: str = "1.0.0"
    stale_after_hours: int = 24
    submission_fetch_timeout_seconds: float = 10.0
    user_experience_limit: int = 10
    excerpt_length: int = 200
    default_page_size: int = 50

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/erasmus_journey.db"
        return "sqlite:///./erasmus_journey.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
