"""Exception hierarchy shared by the ingestion pipeline."""

from __future__ import annotations


class IngestError(Exception):
    """Base class for every failure raised by signal_ingest."""


class ConfigError(IngestError):
    """Required configuration or credential is missing or invalid."""


class TransportError(IngestError):
    """Network-level failure while talking to a remote endpoint."""


class FetchTimeout(TransportError):
    """A request exceeded its configured timeout."""


class TooManyRedirects(TransportError):
    """Redirect chain exceeded the configured hop limit."""

    def __init__(self, url: str, max_redirects: int) -> None:
        super().__init__(f"Exceeded {max_redirects} redirects starting at {url}")
        self.url = url
        self.max_redirects = max_redirects


class RemoteError(IngestError):
    """The remote store answered with a non-2xx status."""

    def __init__(self, operation: str, status_code: int, body: str) -> None:
        super().__init__(f"{operation} {status_code}: {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body


__all__ = [
    "ConfigError",
    "FetchTimeout",
    "IngestError",
    "RemoteError",
    "TooManyRedirects",
    "TransportError",
]
