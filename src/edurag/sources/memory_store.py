"""In-memory source store, optionally seeded from a YAML catalogue."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from edurag.sources.base import Source, SourceStore

logger = logging.getLogger(__name__)


class InMemorySourceStore(SourceStore):
    """Dict-backed ``SourceStore``."""

    def __init__(self, sources: Iterable[Source] = ()):
        self._sources: dict[str, Source] = {}
        for source in sources:
            self.add(source)

    def add(self, source: Source) -> None:
        self._sources[source.id] = source

    def get_sources_by_ids(self, ids: Iterable[str]) -> list[Source]:
        return [self._sources[i] for i in dict.fromkeys(ids) if i in self._sources]

    def list_sources(self) -> list[Source]:
        return list(self._sources.values())

    @classmethod
    def from_yaml(cls, path: str | Path) -> InMemorySourceStore:
        """Load a catalogue of the form ``sources: [{id, title, category, ...}]``.

        A bare list at the top level is accepted too.
        """
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or []

        items = data if isinstance(data, list) else data.get("sources", [])
        store = cls(
            Source(
                id=str(item["id"]),
                title=item["title"],
                category=item.get("category", ""),
                file_url=item.get("file_url"),
                content=item.get("content"),
            )
            for item in items
        )
        logger.info("Loaded %d sources from %s", len(store.list_sources()), path)
        return store

    def to_yaml(self, path: str | Path) -> None:
        """Write the catalogue in the format ``from_yaml`` reads."""
        items = []
        for source in self._sources.values():
            item = {"id": source.id, "title": source.title, "category": source.category}
            if source.file_url:
                item["file_url"] = source.file_url
            if source.content:
                item["content"] = source.content
            items.append(item)

        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump({"sources": items}, fh, sort_keys=False, allow_unicode=True)
