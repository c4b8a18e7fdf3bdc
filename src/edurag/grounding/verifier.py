"""Verification of single claims against source material."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edurag.errors import ClaimVerificationFailed
from edurag.grounding.prompts import VERIFICATION_SYSTEM_PROMPT, build_verification_prompt
from edurag.grounding.schemas import Claim, ClaimVerification, VerificationStatus
from edurag.llm.base import LLMProvider
from edurag.llm.structured import parse_json_response
from edurag.sources.base import Source

logger = logging.getLogger(__name__)

MIN_CONTEXT_CHARS = 50


class VerificationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    found: bool = False
    matched_fact: str | None = Field(default=None, alias="matchedFact")
    source: str | None = None
    confidence: int = 0
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.NOT_FOUND, alias="verificationStatus",
    )
    explanation: str = ""
    discrepancy: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: object) -> int:
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0
        return int(min(max(number, 0.0), 100.0))

    @field_validator("verification_status", mode="before")
    @classmethod
    def _coerce_status(cls, value: object) -> VerificationStatus:
        return VerificationStatus.coerce(value)


def build_context(sources: Sequence[Source], context: str = "") -> str:
    """Explicit retrieval context wins; otherwise concatenate source contents."""
    if context and context.strip():
        return context
    return "\n\n".join(f"[{s.title}]: {s.content or ''}" for s in sources)


class FactVerifier:
    """Asks the language model whether the sources support a claim."""

    def __init__(self, llm: LLMProvider, max_tokens: int = 500, temperature: float = 0.1):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    def verify(
        self,
        claim: Claim,
        sources: Sequence[Source],
        context: str = "",
        strict: bool = False,
    ) -> ClaimVerification:
        """Verify ``claim`` against ``context`` or, failing that, the sources.

        Context shorter than 50 characters is treated as no evidence at all
        and yields ``no_sources`` without calling the model. Model failures
        yield ``not_found`` with confidence 0 unless ``strict`` is set, in
        which case ``ClaimVerificationFailed`` is raised.
        """
        evidence = build_context(sources, context)
        if len(evidence.strip()) < MIN_CONTEXT_CHARS:
            return ClaimVerification(
                claim_id=claim.id,
                status=VerificationStatus.NO_SOURCES,
                confidence=0,
                explanation="No source materials available for verification",
            )

        try:
            raw = self.llm.generate(
                build_verification_prompt(claim.text, evidence),
                system=VERIFICATION_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            payload = parse_json_response(raw, VerificationPayload)
        except Exception as exc:
            if strict:
                raise ClaimVerificationFailed(f"Verification of claim {claim.id} failed: {exc}") from exc
            logger.warning("Verification of claim %s failed: %s", claim.id, exc)
            return ClaimVerification(
                claim_id=claim.id,
                status=VerificationStatus.NOT_FOUND,
                confidence=0,
                explanation=f"Verification failed: {exc}",
            )

        return ClaimVerification(
            claim_id=claim.id,
            status=payload.verification_status,
            confidence=payload.confidence,
            matched_fact=payload.matched_fact,
            source_label=payload.source,
            explanation=payload.explanation,
            discrepancy=payload.discrepancy,
        )
