"""Run coordinator wiring together fetching, parsing, dedup and export."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

import structlog

from .config import IngestConfig
from .engine import DeduplicationStore, FeedParser, Fetcher
from .engine.dedup import MergeResult
from .engine.exporter import BaseExporter, batched
from .errors import IngestError
from .logging_conf import configure_logging

QUERY_DISPLAY_WIDTH = 40


@dataclass(slots=True)
class BatchResult:
    index: int
    submitted: int
    inserted: int = 0
    error: str | None = None

    @property
    def skipped(self) -> int:
        return self.submitted - self.inserted if self.error is None else 0


@dataclass
class RunSummary:
    queries: int = 0
    fetched: int = 0
    unique: int = 0
    inserted: int = 0
    skipped: int = 0
    failed_queries: list[str] = field(default_factory=list)
    batches: list[BatchResult] = field(default_factory=list)
    prune_result: str | None = None
    prune_error: str | None = None

    @property
    def failed_batches(self) -> int:
        return sum(1 for batch in self.batches if batch.error is not None)


def display_query(query: str) -> str:
    return query[:QUERY_DISPLAY_WIDTH]


class Orchestrator:
    """Drive one ingestion run: prune, fetch every query, dedup, submit in batches."""

    def __init__(
        self,
        config: IngestConfig,
        fetcher: Fetcher,
        exporter: BaseExporter,
        parser: FeedParser | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.exporter = exporter
        self.parser = parser or FeedParser()
        self._sleep = sleep
        self.logger = logger or configure_logging().bind(component="orchestrator")

    def run(self) -> RunSummary:
        summary = RunSummary(queries=len(self.config.queries))
        self._prune(summary)

        self.logger.info("fetch_started", queries=len(self.config.queries))
        store = DeduplicationStore()
        for query in self.config.queries:
            merged = self._collect(query, store, summary)
            summary.fetched += merged.received
            self.logger.info(
                "query_fetched",
                query=display_query(query),
                items=merged.received,
                new=merged.accepted,
                dropped=merged.dropped,
            )
            self._sleep(self.config.inter_query_delay)

        items = store.items
        summary.unique = len(items)
        self.logger.info("unique_items", total=summary.unique)
        if not items:
            self.logger.info("no_items_to_insert")
            return summary

        records = [item.to_record() for item in items]
        for index, batch in enumerate(batched(records, self.config.batch_size), start=1):
            result = self._submit(index, batch)
            summary.batches.append(result)
            summary.inserted += result.inserted
            summary.skipped += result.skipped

        self.logger.info(
            "run_complete",
            inserted=summary.inserted,
            duplicates=summary.skipped,
            failed_batches=summary.failed_batches,
        )
        return summary

    def close(self) -> None:
        self.fetcher.close()
        self.exporter.close()

    # ------------------------------------------------------------------
    def _prune(self, summary: RunSummary) -> None:
        try:
            summary.prune_result = self.exporter.prune(self.config.prune_days)
        except IngestError as exc:
            summary.prune_error = str(exc)
            self.logger.error("cleanup_failed", days=self.config.prune_days, error=str(exc))
            return
        self.logger.info(
            "cleanup_complete", days=self.config.prune_days, result=summary.prune_result
        )

    def _collect(self, query: str, store: DeduplicationStore, summary: RunSummary) -> MergeResult:
        try:
            response = self.fetcher.fetch_query(query)
            items = self.parser.parse(response.text)
        except IngestError as exc:
            summary.failed_queries.append(query)
            self.logger.error("query_failed", query=query, error=str(exc))
            return MergeResult(received=0, accepted=0)
        return store.merge(items, query)

    def _submit(self, index: int, batch: list[dict]) -> BatchResult:
        try:
            inserted = self.exporter.export_batch(batch)
        except IngestError as exc:
            self.logger.error("batch_insert_failed", batch=index, size=len(batch), error=str(exc))
            return BatchResult(index=index, submitted=len(batch), error=str(exc))
        result = BatchResult(index=index, submitted=len(batch), inserted=inserted)
        self.logger.info(
            "batch_inserted", batch=index, inserted=result.inserted, duplicates=result.skipped
        )
        return result


__all__ = ["BatchResult", "Orchestrator", "RunSummary", "display_query"]
