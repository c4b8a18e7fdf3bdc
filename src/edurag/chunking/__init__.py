"""Overlapping character-window chunking for course documents."""

from edurag.chunking.base import BaseChunker
from edurag.chunking.schemas import Chunk
from edurag.chunking.text_chunker import TextChunker, chunk_text

__all__ = ["BaseChunker", "Chunk", "TextChunker", "chunk_text"]
