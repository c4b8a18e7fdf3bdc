"""Vector index backends — in-memory (numpy) and FAISS."""

from edurag.vectorstore.base import VectorIndex
from edurag.vectorstore.factory import available_indexes, get_vector_index
from edurag.vectorstore.schemas import IndexHit, IndexRecord

__all__ = [
    "IndexHit",
    "IndexRecord",
    "VectorIndex",
    "available_indexes",
    "get_vector_index",
]
