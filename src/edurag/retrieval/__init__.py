"""Retrieval — query embedding, index search, metadata enrichment."""

from edurag.retrieval.retriever import Retriever
from edurag.retrieval.schemas import RetrievalResult, RetrievedMatch

__all__ = ["RetrievalResult", "RetrievedMatch", "Retriever"]
