"""Source-document metadata store."""

from edurag.sources.base import Source, SourceStore
from edurag.sources.memory_store import InMemorySourceStore

__all__ = ["InMemorySourceStore", "Source", "SourceStore"]
