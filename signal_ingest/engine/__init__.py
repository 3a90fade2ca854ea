"""Engine components orchestrating fetch → parse → dedup → export."""

from .dedup import DeduplicationStore, dedup_key, deduplicate
from .fetcher import FetchResponse, Fetcher, build_feed_url
from .parser import FeedParser, SignalItem, decode_entities, parse_feed

__all__ = [
    "DeduplicationStore",
    "FeedParser",
    "FetchResponse",
    "Fetcher",
    "SignalItem",
    "build_feed_url",
    "decode_entities",
    "dedup_key",
    "deduplicate",
    "parse_feed",
]
