"""Abstract base class for vector indexes."""

from __future__ import annotations

from abc import ABC, abstractmethod

from edurag.errors import DimensionMismatchError
from edurag.vectorstore.schemas import IndexHit, IndexRecord


class VectorIndex(ABC):
    """Interface for vector index backends.

    An index holds vectors of a single dimensionality. The first write fixes
    it when the constructor did not; later writes or queries with another
    size raise ``DimensionMismatchError``.
    """

    def __init__(self, dimension: int | None = None):
        self._dimension = dimension

    @property
    def dimension(self) -> int | None:
        return self._dimension

    @abstractmethod
    def upsert(self, source_id: str, records: list[IndexRecord]) -> int:
        """Insert records for ``source_id``.

        Returns:
            Number of records written.
        """

    @abstractmethod
    def delete(self, source_id: str) -> int:
        """Delete every record of ``source_id``.

        Returns:
            Number of records deleted.
        """

    @abstractmethod
    def search(self, vector: list[float], threshold: float = 0.0, k: int = 10) -> list[IndexHit]:
        """Return up to ``k`` hits with similarity strictly above ``threshold``.

        Hits are sorted by similarity, highest first; equal similarities keep
        insertion order.
        """

    @abstractmethod
    def count(self) -> int:
        """Return the number of records in the index."""

    def _check_dimension(self, size: int) -> None:
        if self._dimension is None:
            self._dimension = size
        elif size != self._dimension:
            raise DimensionMismatchError(
                f"Vector has {size} dimensions, index holds {self._dimension}"
            )

    @classmethod
    def index_name(cls) -> str:
        """Return human-readable index name."""
        return cls.__name__
