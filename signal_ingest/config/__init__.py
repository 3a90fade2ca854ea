"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import DEFAULT_QUERIES, FeedConfig, IngestConfig, StoreConfig

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_QUERIES",
    "FeedConfig",
    "IngestConfig",
    "StoreConfig",
]
