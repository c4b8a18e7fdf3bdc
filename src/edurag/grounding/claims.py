"""Claim extraction: split generated content into verifiable statements."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from edurag.errors import ClaimExtractionFailed
from edurag.grounding.prompts import EXTRACTION_SYSTEM_PROMPT, build_extraction_prompt
from edurag.grounding.schemas import Claim, Importance
from edurag.llm.base import LLMProvider
from edurag.llm.structured import parse_json_response

logger = logging.getLogger(__name__)


class _ClaimPayload(BaseModel):
    id: int | None = None
    claim: str
    type: str = "technical_fact"
    importance: Importance = Importance.LOW
    location: str = ""

    @field_validator("importance", mode="before")
    @classmethod
    def _normalise_importance(cls, value: object) -> str:
        text = str(value or "").strip().lower()
        return text if text in {i.value for i in Importance} else Importance.LOW.value


class ClaimsPayload(BaseModel):
    claims: list[_ClaimPayload] = Field(default_factory=list)


class ClaimExtractor:
    """Asks the language model for the factual claims made by a text."""

    def __init__(self, llm: LLMProvider, max_tokens: int = 2000, temperature: float = 0.2):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    def extract(self, content: str, strict: bool = False) -> list[Claim]:
        """Return the claims found in ``content``.

        Args:
            content: Generated markdown; only the first 4000 characters are sent.
            strict: Raise ``ClaimExtractionFailed`` instead of returning ``[]``
                when the model call or its response fails.
        """
        if not content.strip():
            return []

        try:
            raw = self.llm.generate(
                build_extraction_prompt(content),
                system=EXTRACTION_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            payload = parse_json_response(raw, ClaimsPayload)
        except Exception as exc:
            if strict:
                raise ClaimExtractionFailed(f"Claim extraction failed: {exc}") from exc
            logger.warning("Claim extraction failed: %s", exc)
            return []

        claims = [
            Claim(
                id=item.id if item.id is not None else i,
                text=item.claim.strip(),
                type=item.type,
                importance=item.importance,
                location=item.location,
            )
            for i, item in enumerate(payload.claims, 1)
            if item.claim.strip()
        ]
        logger.info("Extracted %d claims from content", len(claims))
        return claims
