"""JSON-lines exporter used for dry runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from .base import BaseExporter


class FileExporter(BaseExporter):
    """Append records to a local ``.jsonl`` file instead of the remote store."""

    def __init__(self, output_dir: Path, run_tag: str | None = None, prefix: str = "signals") -> None:
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_tag = run_tag or datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        self.path = self.output_dir / f"{prefix}-{self.run_tag}.jsonl"
        self._file = self.path.open("a", encoding="utf-8")

    def prune(self, older_than_days: int) -> str:
        return "skipped (dry run)"

    def export_batch(self, records: Sequence[dict]) -> int:
        for record in records:
            json.dump(record, self._file, ensure_ascii=False)
            self._file.write("\n")
        self._file.flush()
        return len(records)

    def close(self) -> None:
        self._file.close()


__all__ = ["FileExporter"]
