"""Google Gemini embedding provider — text-embedding-004.

Requires the ``gemini`` extra and ``GEMINI_API_KEY`` (or ``GOOGLE_API_KEY``).
The Gemini endpoint embeds one text per request here; batches are sent
sequentially.
"""

from __future__ import annotations

import logging
from typing import Any

from edurag.embeddings.base import EmbeddingProvider
from edurag.errors import RateLimitedError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-004"
DEFAULT_DIM = 768


class GeminiEmbeddingProvider(EmbeddingProvider):
    """Embed text via the Gemini API (``google-genai``)."""

    max_chars = 10000

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        dimension: int = DEFAULT_DIM,
    ):
        try:
            from google import genai
            from google.genai import errors
        except ImportError as exc:
            raise ImportError(
                "google-genai package required: pip install edurag[gemini]"
            ) from exc

        self.model = model
        self._dimension = dimension
        self._errors = errors
        self._client: Any = genai.Client(api_key=api_key) if api_key else genai.Client()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self._embed_single(text) for text in texts]

    def embed_query(self, query: str) -> list[float]:
        return self._embed_single(query)

    @property
    def dimension(self) -> int:
        return self._dimension

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _embed_single(self, text: str) -> list[float]:
        try:
            result = self._client.models.embed_content(model=self.model, contents=text)
        except self._errors.APIError as exc:
            if getattr(exc, "code", None) == 429:
                raise RateLimitedError(str(exc)) from exc
            raise
        return list(result.embeddings[0].values)
