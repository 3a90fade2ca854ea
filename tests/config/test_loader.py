from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from signal_ingest.config import ConfigLocator, ConfigRepository, IngestConfig
from signal_ingest.errors import ConfigError


def test_config_locator_uses_env_and_creates_directories(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SIGNAL_INGEST_HOME", str(tmp_path))
    locator = ConfigLocator()
    assert locator.project_root == tmp_path.resolve()
    for path in (locator.data_dir, locator.outputs_dir, locator.logs_dir):
        assert path.exists()
    assert locator.config_path() == tmp_path.resolve() / "data" / "ingest_config.yaml"


def test_default_config_written_on_first_load(temp_config_repository: ConfigRepository) -> None:
    config = temp_config_repository.load_config()
    path = temp_config_repository.locator.config_path()
    assert path.exists()
    assert IngestConfig.model_validate(yaml.safe_load(path.read_text(encoding="utf-8"))) == config


def test_save_and_reload_roundtrip(temp_config_repository: ConfigRepository) -> None:
    config = IngestConfig(queries=["water futures"], batch_size=10)
    temp_config_repository.save_config(config)
    fresh = ConfigRepository(temp_config_repository.locator)
    assert fresh.load_config() == config


def test_explicit_json_and_yaml_paths(tmp_path: Path, temp_config_repository: ConfigRepository) -> None:
    json_path = tmp_path / "custom.json"
    json_path.write_text(json.dumps({"queries": ["a", "b"], "prune_days": 30}), encoding="utf-8")
    assert temp_config_repository.load_config(json_path).prune_days == 30

    yaml_path = tmp_path / "custom.yml"
    yaml_path.write_text("queries:\n  - aquifer\nstore:\n  table: signals_test\n", encoding="utf-8")
    loaded = temp_config_repository.load_config(yaml_path)
    assert loaded.queries == ["aquifer"]
    assert loaded.store.table == "signals_test"


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("bad.yaml", "- just\n- a list\n"),
        ("bad.yaml", "batch_size: 0\n"),
        ("bad.json", "{not json"),
        ("bad.toml", "queries = []"),
    ],
)
def test_invalid_files_raise_config_error(
    tmp_path: Path, temp_config_repository: ConfigRepository, filename: str, content: str
) -> None:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        temp_config_repository.load_config(path)


def test_missing_explicit_path(tmp_path: Path, temp_config_repository: ConfigRepository) -> None:
    with pytest.raises(ConfigError):
        temp_config_repository.load_config(tmp_path / "absent.yaml")


def test_load_credentials() -> None:
    config = IngestConfig()
    assert ConfigRepository.load_credentials(config, {"SUPABASE_KEY": " key "}) == "key"
    with pytest.raises(ConfigError, match="SUPABASE_KEY"):
        ConfigRepository.load_credentials(config, {})
    with pytest.raises(ConfigError):
        ConfigRepository.load_credentials(config, {"SUPABASE_KEY": ""})
    custom = IngestConfig(store={"key_env": "STORE_TOKEN"})
    assert ConfigRepository.load_credentials(custom, {"STORE_TOKEN": "t"}) == "t"
