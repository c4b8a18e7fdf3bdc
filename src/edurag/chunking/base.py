"""Abstract base class for all chunkers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from edurag.chunking.schemas import Chunk


class BaseChunker(ABC):
    """Interface for document chunking strategies."""

    @abstractmethod
    def chunk(self, text: str, source_id: str = "") -> list[Chunk]:
        """Split text into chunks.

        Args:
            text: Full document text.
            source_id: Identifier of the source document, copied to each chunk.

        Returns:
            List of ``Chunk`` objects in ordinal order.
        """

    @classmethod
    def strategy_name(cls) -> str:
        """Return human-readable strategy name."""
        return cls.__name__
