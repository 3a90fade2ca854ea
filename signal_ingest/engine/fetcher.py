"""HTTP retrieval of search feeds with a bounded redirect chain."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict
from urllib.parse import quote, urljoin

import httpx
import structlog

from ..config import FeedConfig, IngestConfig
from ..errors import FetchTimeout, TooManyRedirects, TransportError

# encodeURIComponent leaves these unescaped
_QUERY_SAFE = "-_.!~*'()"


def encode_query(query: str) -> str:
    return quote(query, safe=_QUERY_SAFE)


def build_feed_url(query: str, feed: FeedConfig) -> str:
    """Return the search feed URL for a query with the fixed locale and recency window."""

    return (
        f"{feed.base_url}?q={encode_query(query)}"
        f"&hl={feed.hl}&gl={feed.gl}&ceid={feed.ceid}&when={feed.when}"
    )


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str]
    redirects: list[str] = field(default_factory=list)


class Fetcher:
    """Sequential feed client: one GET at a time, no retries."""

    def __init__(
        self,
        config: IngestConfig,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.max_redirects = config.max_redirects
        self.logger = logger or structlog.get_logger("signal_ingest.fetcher")
        # Redirects are followed by hand so the hop count can be capped
        self._client = client or httpx.Client(
            follow_redirects=False,
            timeout=config.fetch_timeout,
        )
        self._headers = {"User-Agent": config.feed.user_agent}

    def close(self) -> None:
        self._client.close()

    def feed_url(self, query: str) -> str:
        return build_feed_url(query, self.config.feed)

    def fetch(self, url: str) -> FetchResponse:
        current = url
        visited: list[str] = []
        for _ in range(self.max_redirects + 1):
            response = self._get(current)
            if not response.has_redirect_location:
                if response.status_code >= 400:
                    self.logger.warning(
                        "feed_unexpected_status",
                        url=current,
                        status=response.status_code,
                    )
                return FetchResponse(
                    url=current,
                    status_code=response.status_code,
                    text=response.text,
                    headers=dict(response.headers),
                    redirects=visited,
                )
            visited.append(current)
            current = urljoin(current, response.headers["Location"])
            self.logger.debug("feed_redirect", location=current, hop=len(visited))
        raise TooManyRedirects(url, self.max_redirects)

    def fetch_query(self, query: str) -> FetchResponse:
        return self.fetch(self.feed_url(query))

    def _get(self, url: str) -> httpx.Response:
        try:
            return self._client.get(
                url,
                headers=self._headers,
                timeout=self.config.fetch_timeout,
            )
        except httpx.TimeoutException as exc:
            raise FetchTimeout(f"timeout after {self.config.fetch_timeout_ms}ms: {url}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc


__all__ = ["FetchResponse", "Fetcher", "build_feed_url", "encode_query"]
