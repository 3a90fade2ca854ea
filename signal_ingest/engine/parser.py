"""Pragmatic RSS item extraction.

The parser is a lexical scan over a small tag subset rather than an XML
parser: it never raises on malformed or truncated documents, missing tags
simply become empty fields. Callers depend only on ``parse_feed`` so the scan
can be replaced by a structured parser without touching them.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

_ITEM_RE = re.compile(r"<item>([\s\S]*?)</item>")
_TITLE_RE = re.compile(r"<title>([\s\S]*?)</title>")
_LINK_RE = re.compile(r"<link>([\s\S]*?)</link>")
_PUBDATE_RE = re.compile(r"<pubDate>([\s\S]*?)</pubDate>")
_SOURCE_RE = re.compile(r"<source[^>]*>([\s\S]*?)</source>")

# Order is significant: &amp; first
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


@dataclass(slots=True)
class SignalItem:
    """One discovered news item."""

    title: str
    link: str = ""
    source: str = ""
    published_at: str | None = None
    query: str | None = None

    def with_query(self, query: str) -> "SignalItem":
        return SignalItem(
            title=self.title,
            link=self.link,
            source=self.source,
            published_at=self.published_at,
            query=query,
        )

    def to_record(self) -> dict[str, Any]:
        return asdict(self)


def decode_entities(text: str) -> str:
    for entity, literal in _ENTITIES:
        text = text.replace(entity, literal)
    return text


def iso_instant(value: datetime) -> str:
    """Format an aware datetime as a UTC instant with millisecond precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_pub_date(raw: str) -> str | None:
    """Convert an RFC-822 date to an ISO-8601 instant.

    Empty and unparseable values both yield ``None``.
    """

    raw = raw.strip()
    if not raw:
        return None
    # Out-of-range years raise OverflowError, both here and on UTC conversion
    try:
        parsed = parsedate_to_datetime(raw)
        if parsed is None:
            return None
        return iso_instant(parsed)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def _first(pattern: re.Pattern[str], block: str) -> str:
    match = pattern.search(block)
    return match.group(1) if match else ""


def parse_item(block: str) -> SignalItem:
    return SignalItem(
        title=decode_entities(_first(_TITLE_RE, block)).strip(),
        link=_first(_LINK_RE, block).strip(),
        source=decode_entities(_first(_SOURCE_RE, block)).strip(),
        published_at=parse_pub_date(_first(_PUBDATE_RE, block)),
    )


def parse_feed(text: str) -> list[SignalItem]:
    """Extract every ``<item>`` block of a feed document, in document order."""

    return [parse_item(match.group(1)) for match in _ITEM_RE.finditer(text or "")]


class FeedParser:
    """Object facade over ``parse_feed`` for callers holding a parser instance."""

    def parse(self, text: str) -> list[SignalItem]:
        return parse_feed(text)


__all__ = [
    "FeedParser",
    "SignalItem",
    "decode_entities",
    "iso_instant",
    "parse_feed",
    "parse_item",
    "parse_pub_date",
]
