"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")


def batched(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive chunks of at most ``size`` items."""

    if size < 1:
        raise ValueError("batch size must be >= 1")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class BaseExporter(ABC):
    """Uniform exporter contract enabling plug-and-play outputs."""

    @abstractmethod
    def prune(self, older_than_days: int) -> str:
        """Remove stale, unreviewed records and describe what happened."""

    @abstractmethod
    def export_batch(self, records: Sequence[dict]) -> int:
        """Persist one batch and return how many records were actually inserted."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter", "batched"]
