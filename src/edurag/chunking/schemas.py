"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A single retrievable slice of a source document.

    ``start_offset`` indexes into the original document text, so
    ``text == document[start_offset:start_offset + len(text)]``.
    """

    source_id: str
    ordinal: int
    text: str
    start_offset: int

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.text)
