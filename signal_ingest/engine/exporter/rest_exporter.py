"""Exporter writing signals to a PostgREST-style REST store."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Sequence

import httpx
import structlog

from ...config import StoreConfig
from ...errors import ConfigError, FetchTimeout, RemoteError, TransportError
from ..parser import iso_instant
from .base import BaseExporter

PREFER_HEADERS_ONLY = "return=headers-only"
PREFER_IGNORE_DUPLICATES = "resolution=ignore-duplicates,return=representation"


def prune_cutoff(older_than_days: int, now: datetime) -> str:
    """ISO-8601 instant ``older_than_days`` whole days before ``now``."""

    return iso_instant(now - timedelta(days=older_than_days))


class RestStoreExporter(BaseExporter):
    """Duplicate-tolerant batch inserts and stale-row pruning over REST.

    The store enforces record uniqueness itself; conflicting rows are
    skipped server-side and only the rows it echoes back count as inserted.
    """

    def __init__(
        self,
        store: StoreConfig,
        api_key: str,
        client: httpx.Client | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if not api_key:
            raise ConfigError(f"{store.key_env} env var is required")
        self.store = store
        self._api_key = api_key
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or structlog.get_logger("signal_ingest.exporter")
        self._client = client or httpx.Client(timeout=store.timeout_ms / 1000)

    @property
    def collection_url(self) -> str:
        return self.store.collection_url

    def _auth_headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    def prune(self, older_than_days: int, now: datetime | None = None) -> str:
        cutoff = prune_cutoff(older_than_days, now or self._clock())
        headers = self._auth_headers()
        headers["Prefer"] = PREFER_HEADERS_ONLY
        # Both filters apply together: only unreviewed rows older than the cutoff
        params = {"created_at": f"lt.{cutoff}", "is_relevant": "is.null"}
        response = self._send("DELETE", headers=headers, params=params)
        if not response.is_success:
            raise RemoteError("Cleanup", response.status_code, response.text)
        return response.headers.get("Content-Range") or "ok"

    def export_batch(self, records: Sequence[dict]) -> int:
        headers = self._auth_headers()
        headers["Content-Type"] = "application/json"
        headers["Prefer"] = PREFER_IGNORE_DUPLICATES
        body = json.dumps(list(records), ensure_ascii=False).encode("utf-8")
        response = self._send("POST", headers=headers, content=body)
        if not response.is_success:
            raise RemoteError("Insert", response.status_code, response.text)
        return self._count_inserted(response)

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, self.collection_url, **kwargs)
        except httpx.TimeoutException as exc:
            raise FetchTimeout(f"{method} {self.collection_url} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

    def _count_inserted(self, response: httpx.Response) -> int:
        try:
            payload = response.json()
        except ValueError:
            self.logger.debug("insert_response_not_json", status=response.status_code)
            return 0
        return len(payload) if isinstance(payload, list) else 0


__all__ = ["RestStoreExporter", "prune_cutoff"]
