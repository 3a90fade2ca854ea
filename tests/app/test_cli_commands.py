from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from signal_ingest.app import AppState, app, build_orchestrator
from signal_ingest.config import ConfigRepository, IngestConfig
from signal_ingest.engine.exporter import FileExporter, RestStoreExporter
from signal_ingest.errors import ConfigError
from signal_ingest.orchestrator import BatchResult, RunSummary


class StubOrchestrator:
    def __init__(self, summary: RunSummary) -> None:
        self.summary = summary
        self.runs = 0
        self.closed = False

    def run(self) -> RunSummary:
        self.runs += 1
        return self.summary

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def state(temp_config_repository: ConfigRepository, monkeypatch: pytest.MonkeyPatch) -> AppState:
    state = AppState(repository=temp_config_repository)
    monkeypatch.setattr("signal_ingest.app.build_state", lambda verbose: state)
    # wide console so URLs are not folded across lines
    monkeypatch.setattr("signal_ingest.app.console", Console(width=250))
    return state


def test_run_without_credential_exits_1(state, monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    result = CliRunner().invoke(app, ["run"])
    assert result.exit_code == 1
    assert "SUPABASE_KEY" in result.stdout


def test_run_prints_summary(state, monkeypatch) -> None:
    summary = RunSummary(
        queries=10,
        fetched=42,
        unique=40,
        inserted=35,
        skipped=5,
        batches=[BatchResult(index=1, submitted=40, inserted=35)],
        prune_result="*/3",
    )
    stub = StubOrchestrator(summary)
    captured: dict = {}

    def fake_build(repository, config, dry_run=False):
        captured["dry_run"] = dry_run
        return stub

    monkeypatch.setattr("signal_ingest.app.build_orchestrator", fake_build)
    result = CliRunner().invoke(app, ["run", "--dry-run"])
    assert result.exit_code == 0, result.stdout
    assert stub.runs == 1
    assert stub.closed
    assert captured["dry_run"] is True
    assert "Ingestion summary" in result.stdout
    assert "35" in result.stdout
    assert "*/3" in result.stdout


def test_run_with_invalid_config_exits_1(state, tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("batch_size: -5\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["run", "--config", str(path)])
    assert result.exit_code == 1


def test_queries_lists_feed_urls(state, tmp_path: Path) -> None:
    path = tmp_path / "queries.yaml"
    path.write_text("queries:\n  - desalination plant\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["queries", "--config", str(path)])
    assert result.exit_code == 0, result.stdout
    assert "desalination plant" in result.stdout
    assert "desalination%20plant" in result.stdout


def test_log_show_reports_missing_entries(state) -> None:
    result = CliRunner().invoke(app, ["log", "show", "--errors"])
    assert result.exit_code == 0, result.stdout


def test_build_orchestrator_selects_exporter(temp_config_repository, monkeypatch) -> None:
    config = IngestConfig(queries=["q"])
    dry = build_orchestrator(temp_config_repository, config, dry_run=True)
    assert isinstance(dry.exporter, FileExporter)
    dry.close()

    monkeypatch.setenv("SUPABASE_KEY", "secret")
    live = build_orchestrator(temp_config_repository, config)
    assert isinstance(live.exporter, RestStoreExporter)
    live.close()

    monkeypatch.delenv("SUPABASE_KEY")
    with pytest.raises(ConfigError):
        build_orchestrator(temp_config_repository, config)
