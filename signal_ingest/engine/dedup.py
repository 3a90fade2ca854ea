"""In-run deduplication of signal items keyed by title and source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .parser import SignalItem

DedupKey = tuple[str, str]


def dedup_key(title: str, source: str) -> DedupKey:
    # A pair rather than a joined string, so no delimiter can collide with field text
    return (title, source)


@dataclass
class MergeResult:
    received: int
    accepted: int

    @property
    def dropped(self) -> int:
        return self.received - self.accepted


class DeduplicationStore:
    """Ordered accumulator where the first occurrence of a key wins.

    Uniqueness for persistence is the remote store's concern; this only
    prevents submitting the same item twice within one run.
    """

    def __init__(self) -> None:
        self._seen: set[DedupKey] = set()
        self._items: list[SignalItem] = []

    def add(self, item: SignalItem, query: str) -> bool:
        if not item.title:
            return False
        key = dedup_key(item.title, item.source)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._items.append(item.with_query(query))
        return True

    def merge(self, items: Iterable[SignalItem], query: str) -> MergeResult:
        received = 0
        accepted = 0
        for item in items:
            received += 1
            if self.add(item, query):
                accepted += 1
        return MergeResult(received=received, accepted=accepted)

    @property
    def items(self) -> list[SignalItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


def deduplicate(pairs: Iterable[tuple[SignalItem, str]]) -> list[SignalItem]:
    """Collapse ``(item, query)`` pairs into unique items, preserving first-seen order."""

    store = DeduplicationStore()
    for item, query in pairs:
        store.add(item, query)
    return store.items


__all__ = ["DedupKey", "DeduplicationStore", "MergeResult", "dedup_key", "deduplicate"]
