"""Character-window chunker with overlap and boundary-aware breaks.

Walks the document in windows of ``max_chars`` characters. Each window is cut
at the nearest paragraph break, sentence end, or whitespace found in the
back half of the window, so chunks rarely split mid-sentence. The
next window starts ``overlap_chars`` before the cut.

Chunks are raw slices of the input, never re-trimmed, so the sequence can be
stitched back into the original text by dropping each chunk's overlap.
"""

from __future__ import annotations

import logging

from edurag.chunking.base import BaseChunker
from edurag.chunking.schemas import Chunk
from edurag.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MAX_CHARS = 1000
OVERLAP_CHARS = 100
LOOKBACK_RATIO = 0.5

_SENTENCE_ENDS = (". ", "! ", "? ", ".\n", "!\n", "?\n")


def _validate(max_chars: int, overlap_chars: int) -> None:
    if max_chars <= 0:
        raise InvalidArgumentError(f"max_chars must be positive, got {max_chars}")
    if overlap_chars < 0:
        raise InvalidArgumentError(f"overlap_chars must be >= 0, got {overlap_chars}")
    if overlap_chars >= max_chars:
        raise InvalidArgumentError(
            f"overlap_chars ({overlap_chars}) must be smaller than max_chars ({max_chars})"
        )


def _find_break(text: str, start: int, end: int, lookback: int, overlap: int) -> int:
    """Pick the cut position for the window ``text[start:end]``.

    The cut always lies past ``start + overlap`` so the next window advances.
    """
    floor = max(start + overlap + 1, end - lookback)
    if floor >= end:
        return end

    paragraph = text.rfind("\n\n", floor, end)
    if paragraph != -1:
        return paragraph + 2

    sentence = max(text.rfind(marker, floor, end) for marker in _SENTENCE_ENDS)
    if sentence != -1:
        return sentence + 1

    for pos in range(end - 1, floor - 1, -1):
        if text[pos].isspace():
            return pos

    return end


def chunk_text(
    text: str,
    max_chars: int = MAX_CHARS,
    overlap_chars: int = OVERLAP_CHARS,
    source_id: str = "",
    lookback: int | None = None,
) -> list[Chunk]:
    """Split ``text`` into overlapping chunks of at most ``max_chars`` characters.

    Args:
        text: Document text.
        max_chars: Maximum chunk length.
        overlap_chars: Characters shared between consecutive chunks.
        source_id: Source document identifier copied onto every chunk.
        lookback: How far back from a window end to look for a boundary.
            Defaults to half of ``max_chars``.

    Returns:
        Chunks in ordinal order; empty for empty or whitespace-only text.

    Raises:
        InvalidArgumentError: If ``max_chars <= 0`` or the overlap is not in
            ``[0, max_chars)``.
    """
    _validate(max_chars, overlap_chars)

    if not text or not text.strip():
        return []

    if lookback is None:
        lookback = int(max_chars * LOOKBACK_RATIO)

    begin = len(text) - len(text.lstrip())
    finish = len(text.rstrip())

    chunks: list[Chunk] = []
    start = begin
    while True:
        end = start + max_chars
        if end >= finish:
            chunks.append(Chunk(source_id, len(chunks), text[start:finish], start))
            break

        cut = _find_break(text, start, end, lookback, overlap_chars)
        chunks.append(Chunk(source_id, len(chunks), text[start:cut], start))
        start = cut - overlap_chars

    logger.debug(
        "Chunked %s: %d chars -> %d chunks (max=%d, overlap=%d)",
        source_id or "<text>", finish - begin, len(chunks), max_chars, overlap_chars,
    )
    return chunks


class TextChunker(BaseChunker):
    """Chunker for plain course-material text."""

    def __init__(self, max_chars: int = MAX_CHARS, overlap_chars: int = OVERLAP_CHARS):
        _validate(max_chars, overlap_chars)
        self.max_chars = max_chars
        self.overlap_chars = overlap_chars

    def chunk(self, text: str, source_id: str = "") -> list[Chunk]:
        return chunk_text(
            text,
            max_chars=self.max_chars,
            overlap_chars=self.overlap_chars,
            source_id=source_id,
        )
