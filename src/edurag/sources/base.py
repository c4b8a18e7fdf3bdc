"""Source metadata model and store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Source:
    """Metadata of one uploaded course document."""

    id: str
    title: str
    category: str = ""
    file_url: str | None = None
    content: str | None = None

    @property
    def file_name(self) -> str | None:
        if not self.file_url:
            return None
        return self.file_url.rstrip("/").split("/")[-1]

    @property
    def label(self) -> str:
        """Citation label, e.g. ``Data Structures - Lecture Notes``."""
        return f"{self.title} - {self.category}" if self.category else self.title


class SourceStore(ABC):
    """Interface for the metadata store that knows titles and categories."""

    @abstractmethod
    def get_sources_by_ids(self, ids: Iterable[str]) -> list[Source]:
        """Return the sources that exist among ``ids``; unknown ids are skipped."""

    @abstractmethod
    def list_sources(self) -> list[Source]:
        """Return every known source."""
