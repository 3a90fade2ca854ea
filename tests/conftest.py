"""Shared fixtures: configs, mocked HTTP transports and feed documents."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest
import structlog

from signal_ingest.config import ConfigLocator, ConfigRepository, IngestConfig

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel>
<title>"water rights" - Google News</title>
<item>
  <title>Water &amp; Power board approves sale</title>
  <link>https://news.example.com/a</link>
  <pubDate>Tue, 13 Oct 2026 14:05:00 GMT</pubDate>
  <source url="https://latimes.com">Los Angeles Times</source>
</item>
<item>
  <title>  Aquifer levels fall &quot;sharply&quot;  </title>
  <link> https://news.example.com/b </link>
  <pubDate></pubDate>
  <source url="https://reuters.com">Reuters</source>
</item>
</channel></rss>
"""


def make_feed(*titles: str, source: str = "Reuters") -> str:
    blocks = "".join(
        f"<item><title>{title}</title><link>https://example.com/{index}</link>"
        f'<source url="https://example.com">{source}</source></item>'
        for index, title in enumerate(titles)
    )
    return f"<rss><channel>{blocks}</channel></rss>"


@pytest.fixture
def sample_config() -> Callable[..., IngestConfig]:
    def _builder(**overrides: Any) -> IngestConfig:
        base: dict[str, Any] = {
            "queries": ["water rights", "aquifer depletion"],
            "inter_query_delay_ms": 0,
            "fetch_timeout_ms": 2000,
        }
        base.update(overrides)
        return IngestConfig(**base)

    return _builder


@pytest.fixture
def mock_client() -> Iterable[Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]]:
    clients: list[httpx.Client] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=False)
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 18, 6, 30, 15, 250000, tzinfo=timezone.utc)


@pytest.fixture
def quiet_logger() -> structlog.BoundLogger:
    return structlog.get_logger("tests").bind(component="tests")


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigRepository:
    monkeypatch.setenv("SIGNAL_INGEST_HOME", str(tmp_path))
    return ConfigRepository(ConfigLocator(project_root=tmp_path))


@pytest.fixture
def sample_feed() -> str:
    return SAMPLE_FEED


@pytest.fixture
def feed_builder() -> Callable[..., str]:
    return make_feed
