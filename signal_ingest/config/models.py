"""Pydantic models describing a signal ingestion run."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_QUERIES: list[str] = [
    '"data center" water consumption OR shortage OR restriction',
    '"water rights" acquisition OR sale OR trading',
    "aquifer depletion OR contamination 2026",
    '"water stress" city OR region OR crisis',
    '"cooling water" regulation OR ban OR moratorium',
    "drought emergency declaration 2026",
    '"network state" land OR infrastructure OR physical',
    "water futures price OR trading CME",
    '"data center" moratorium OR ban OR protest',
    "desalination plant OR project 2026",
]


class FeedConfig(BaseModel):
    """Search feed endpoint and the fixed locale/recency selection."""

    base_url: str = "https://news.google.com/rss/search"
    hl: str = "en"
    gl: str = "US"
    ceid: str = "US:en"
    when: str = "7d"
    user_agent: str = "SignalMonitor/1.0"

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return value


class StoreConfig(BaseModel):
    """REST store location; the credential itself is read from the environment."""

    url: str = "https://yljybhpxmfaremvmdkgm.supabase.co"
    table: str = "signals_raw"
    key_env: str = "SUPABASE_KEY"
    timeout_ms: int = 15000

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("table", "key_env")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value cannot be empty")
        return value.strip()

    @property
    def collection_url(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"


class IngestConfig(BaseModel):
    """Everything the orchestrator needs for one run."""

    queries: list[str] = Field(default_factory=lambda: list(DEFAULT_QUERIES))
    batch_size: int = 50
    prune_days: int = 90
    inter_query_delay_ms: int = 1000
    fetch_timeout_ms: int = 15000
    max_redirects: int = 5
    feed: FeedConfig = Field(default_factory=FeedConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    @field_validator("queries", mode="before")
    @classmethod
    def _clean_queries(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("queries expects a list of strings")
        cleaned = [str(item).strip() for item in value if str(item).strip()]
        if not cleaned:
            raise ValueError("at least one query is required")
        return cleaned

    @model_validator(mode="after")
    def _validate_limits(self) -> "IngestConfig":
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.prune_days < 1:
            raise ValueError("prune_days must be >= 1")
        if self.inter_query_delay_ms < 0:
            raise ValueError("inter_query_delay_ms must be >= 0")
        if self.fetch_timeout_ms <= 0:
            raise ValueError("fetch_timeout_ms must be > 0")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")
        return self

    @property
    def fetch_timeout(self) -> float:
        return self.fetch_timeout_ms / 1000

    @property
    def inter_query_delay(self) -> float:
        return self.inter_query_delay_ms / 1000


__all__ = ["DEFAULT_QUERIES", "FeedConfig", "IngestConfig", "StoreConfig"]
