"""Embedding client — primary provider with timeout, one rate-limit retry, and fallback.

Order of attempts for a single text:

1. Primary provider, bounded by ``timeout`` seconds.
2. On ``RateLimitedError``: sleep ``rate_limit_backoff`` seconds and retry the
   primary exactly once.
3. On any other primary failure (timeout, exhausted retry, transport error):
   secondary provider.
4. Both failed: ``EmbeddingUnavailableError`` carrying both messages.

The client holds no state between calls apart from its configuration.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import TypeVar

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from edurag.config import EmbeddingSettings
from edurag.embeddings.base import EmbeddingProvider
from edurag.embeddings.schemas import Embedding
from edurag.errors import EmbeddingUnavailableError, EmptyInputError, RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str, limit: int) -> str:
    """Collapse whitespace runs, trim, and truncate to ``limit`` characters.

    Idempotent: ``clean_text(clean_text(s, n), n) == clean_text(s, n)``.
    """
    return _WHITESPACE.sub(" ", text).strip()[:limit].rstrip()


class EmbeddingClient:
    """Text → ``Embedding`` with primary/secondary providers."""

    def __init__(
        self,
        primary: EmbeddingProvider,
        secondary: EmbeddingProvider | None = None,
        timeout: float | None = 30.0,
        rate_limit_backoff: float = 2.0,
        batch_delay: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.primary = primary
        self.secondary = secondary
        self.timeout = timeout
        self.rate_limit_backoff = rate_limit_backoff
        self.batch_delay = batch_delay
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> EmbeddingClient:
        """Build providers through the factory and wire them into a client."""
        from edurag.embeddings.factory import get_embedding_provider

        primary = get_embedding_provider(
            settings.primary_provider, model=settings.primary_model,
        )
        secondary = None
        if settings.secondary_provider:
            secondary = get_embedding_provider(
                settings.secondary_provider, model=settings.secondary_model,
            )
        return cls(
            primary=primary,
            secondary=secondary,
            timeout=settings.timeout,
            rate_limit_backoff=settings.rate_limit_backoff,
            batch_delay=settings.batch_delay,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed(self, text: str) -> Embedding:
        """Embed a single text.

        Raises:
            EmptyInputError: If nothing remains after cleaning.
            EmbeddingUnavailableError: If both providers fail.
        """
        cleaned = clean_text(text, self.primary.max_chars)
        if not cleaned:
            raise EmptyInputError("Text is empty after cleaning")

        try:
            vector = self._call_primary(lambda: self.primary.embed_query(cleaned))
            return Embedding(vector=list(vector), provider_used=self.primary.provider_name())
        except Exception as exc:
            primary_error = _describe(exc)
            logger.warning(
                "Primary embedding provider %s failed, falling back: %s",
                self.primary.provider_name(), primary_error,
            )

        secondary = self._require_secondary(primary_error)
        try:
            vector = secondary.embed_query(clean_text(text, secondary.max_chars))
        except Exception as exc:
            logger.error("Both embedding providers failed")
            raise EmbeddingUnavailableError(primary_error, _describe(exc)) from exc

        logger.info("Generated embedding with fallback provider %s", secondary.provider_name())
        return Embedding(vector=list(vector), provider_used=secondary.provider_name())

    def embed_batch(self, texts: list[str]) -> list[Embedding]:
        """Embed several texts with one primary call, falling back per text.

        Items that are empty after cleaning are dropped, so the result can
        be shorter than ``texts``; each ``Embedding.index`` gives the position
        of its text in ``texts``.
        """
        kept = [(i, clean_text(t, self.primary.max_chars)) for i, t in enumerate(texts)]
        kept = [(i, c) for i, c in kept if c]
        if not kept:
            return []
        positions = [i for i, _ in kept]
        cleaned = [c for _, c in kept]

        try:
            vectors = self._call_primary(lambda: self.primary.embed_texts(cleaned))
            if len(vectors) != len(cleaned):
                raise ValueError(
                    f"Provider returned {len(vectors)} vectors for {len(cleaned)} texts"
                )
            name = self.primary.provider_name()
            return [
                Embedding(vector=list(v), provider_used=name, index=pos)
                for pos, v in zip(positions, vectors, strict=True)
            ]
        except Exception as exc:
            primary_error = _describe(exc)
            logger.warning(
                "Primary batch embedding failed, falling back to sequential calls: %s",
                primary_error,
            )

        secondary = self._require_secondary(primary_error)
        name = secondary.provider_name()
        embeddings: list[Embedding] = []
        for i, (pos, text) in enumerate(zip(positions, cleaned, strict=True)):
            if i and self.batch_delay > 0:
                self._sleep(self.batch_delay)
            try:
                vector = secondary.embed_query(clean_text(text, secondary.max_chars))
            except Exception as exc:
                logger.error("Failed to embed text %d/%d with fallback", i + 1, len(cleaned))
                raise EmbeddingUnavailableError(primary_error, _describe(exc)) from exc
            embeddings.append(Embedding(vector=list(vector), provider_used=name, index=pos))
        return embeddings

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _require_secondary(self, primary_error: str) -> EmbeddingProvider:
        if self.secondary is None:
            raise EmbeddingUnavailableError(primary_error, "no secondary provider configured")
        return self.secondary

    def _call_primary(self, fn: Callable[[], T]) -> T:
        retrying = Retrying(
            retry=retry_if_exception_type(RateLimitedError),
            stop=stop_after_attempt(2),
            wait=wait_fixed(self.rate_limit_backoff),
            sleep=self._sleep,
            before_sleep=_log_rate_limit,
            reraise=True,
        )
        return retrying(self._with_timeout, fn)

    def _with_timeout(self, fn: Callable[[], T]) -> T:
        if self.timeout is None:
            return fn()

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="embed")
        future = executor.submit(fn)
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeout as exc:
            future.cancel()
            raise TimeoutError(f"embedding request timed out after {self.timeout}s") from exc
        finally:
            executor.shutdown(wait=False)


def _log_rate_limit(retry_state) -> None:
    logger.warning(
        "Embedding provider rate limited, retrying in %.1fs",
        retry_state.next_action.sleep if retry_state.next_action else 0.0,
    )


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__
