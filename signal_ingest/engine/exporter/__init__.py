"""Exporter SPI and implementations."""

from .base import BaseExporter, batched
from .file_exporter import FileExporter
from .rest_exporter import RestStoreExporter, prune_cutoff

__all__ = ["BaseExporter", "FileExporter", "RestStoreExporter", "batched", "prune_cutoff"]
