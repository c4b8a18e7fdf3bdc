"""Local sentence-transformers embeddings, the offline fallback provider.

Requires the ``huggingface`` extra. The model runs in-process, so there is no
HTTP 429 to translate: this provider never raises ``RateLimitedError`` and
any failure (bad input, out of memory) propagates for the client to fall back
or report.
"""

from __future__ import annotations

import logging
from typing import Any

from edurag.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"
DEFAULT_BATCH_SIZE = 32

# Rough characters per word-piece token for English course text.
_CHARS_PER_TOKEN = 4
_FALLBACK_MAX_CHARS = 2000


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Embed course material locally with a sentence-transformers model.

    ``max_chars`` follows the model's ``max_seq_length`` so that the client's
    truncation keeps inputs inside the window the model actually reads.
    Vectors are L2-normalised to match the cosine indexes.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        device: str | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise ImportError(
                "sentence-transformers required: pip install edurag[huggingface]"
            ) from exc

        self.model = model
        self.batch_size = batch_size
        self._model: Any = SentenceTransformer(model, device=device)
        self._dim: int = self._model.get_sentence_embedding_dimension()

        seq_len = getattr(self._model, "max_seq_length", None)
        self.max_chars = seq_len * _CHARS_PER_TOKEN if seq_len else _FALLBACK_MAX_CHARS
        logger.info(
            "Loaded local embedding model %s (dim=%d, max_chars=%d)",
            model, self._dim, self.max_chars,
        )

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        vectors = self._encode(texts)
        return [vec.tolist() for vec in vectors]

    def embed_query(self, query: str) -> list[float]:
        return self._encode([query])[0].tolist()

    @property
    def dimension(self) -> int:
        return self._dim

    def _encode(self, texts: list[str]) -> Any:
        return self._model.encode(
            texts,
            batch_size=self.batch_size,
            normalize_embeddings=True,
            show_progress_bar=False,
        )
