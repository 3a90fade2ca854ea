"""News signal ingestion: search feeds in, deduplicated rows out."""

__version__ = "0.1.0"
