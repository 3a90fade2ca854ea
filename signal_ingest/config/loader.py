"""Configuration loading helpers for signal-ingest."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import IngestConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "ingest_config.yaml"
HOME_ENV = "SIGNAL_INGEST_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot parse configuration file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        return self.data_dir / CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO, schema validation and credentials."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: IngestConfig | None = None

    def load_config(self, path: Path | None = None) -> IngestConfig:
        """Load an explicit config file, or the default one (created on first use)."""

        if path is not None:
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
            if path.suffix not in CONFIG_EXTENSIONS:
                raise ConfigError(f"Unsupported configuration format: {path.suffix}")
            return self._validate(_read_file(path), path)

        if self._cache is not None:
            return self._cache
        default_path = self.locator.config_path()
        if default_path.exists():
            config = self._validate(_read_file(default_path), default_path)
        else:
            config = IngestConfig()
            self.save_config(config)
        self._cache = config
        return config

    def save_config(self, config: IngestConfig, path: Path | None = None) -> Path:
        target = path or self.locator.config_path()
        _write_file(target, config.model_dump(mode="json"))
        if path is None:
            self._cache = config
        return target

    @staticmethod
    def load_credentials(config: IngestConfig, environ: Mapping[str, str] | None = None) -> str:
        """Return the store API key, raising ConfigError when it is not provided."""

        env = os.environ if environ is None else environ
        value = (env.get(config.store.key_env) or "").strip()
        if not value:
            raise ConfigError(f"{config.store.key_env} env var is required")
        return value

    @staticmethod
    def _validate(payload: dict, path: Path) -> IngestConfig:
        try:
            return IngestConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV"]
