"""Semantic grounding: extract claims, verify each, summarise the evidence."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from edurag.config import Settings
from edurag.errors import ClaimExtractionFailed
from edurag.grounding.claims import ClaimExtractor
from edurag.grounding.schemas import (
    Claim,
    ClaimComparison,
    GroundingAnalysis,
    GroundingSummary,
    Importance,
    Recommendation,
    VerificationStatus,
)
from edurag.grounding.verifier import FactVerifier
from edurag.llm.base import LLMProvider
from edurag.llm.factory import llm_from_settings
from edurag.sources.base import Source
from edurag.validation.scoring import round_half_up, score_level

logger = logging.getLogger(__name__)

MAX_CLAIMS = 10
NEUTRAL_SCORE = 50

_CHECKED_IMPORTANCE = (Importance.HIGH, Importance.MEDIUM)

# Points per status out of 100; contradicted earns nothing.
_STATUS_POINTS = {"verified": 100, "partially_verified": 60, "not_found": 30}


def select_claims(claims: Sequence[Claim], max_claims: int = MAX_CLAIMS) -> list[Claim]:
    """High before medium (original order kept within each), low dropped."""
    checked = [c for c in claims if c.importance in _CHECKED_IMPORTANCE]
    checked.sort(key=lambda c: _CHECKED_IMPORTANCE.index(c.importance))
    return checked[:max_claims]


def grounding_score(
    verified: int,
    partial: int,
    not_found: int,
    processed: int,
    has_evidence: bool = True,
) -> int:
    """Weighted share of supported claims, 0-100.

    With nothing processed there is no ratio: neutral when there was no
    evidence to check against, otherwise 0.
    """
    if processed == 0:
        return 0 if has_evidence else NEUTRAL_SCORE
    points = (
        verified * _STATUS_POINTS["verified"]
        + partial * _STATUS_POINTS["partially_verified"]
        + not_found * _STATUS_POINTS["not_found"]
    )
    return round_half_up(points / processed)


def summary_message(verified: int, not_found: int, contradicted: int, total: int) -> str:
    if total == 0:
        return "No claims to verify"
    if contradicted:
        return f"{contradicted} claim(s) contradict source materials. Review needed."

    verified_pct = round_half_up(verified * 100 / total)
    if verified_pct >= 80:
        return (
            f"{verified}/{total} claims verified against source materials. "
            "Content is well-grounded."
        )
    if verified_pct >= 50:
        return f"{verified}/{total} claims verified. {not_found} claims lack source backing."
    return f"Only {verified}/{total} claims verified. Content may contain unsupported statements."


def recommendations(comparisons: Sequence[ClaimComparison]) -> list[Recommendation]:
    statuses = [c.verification.status for c in comparisons]
    contradicted = statuses.count(VerificationStatus.CONTRADICTED)
    unsupported = sum(
        1 for s in statuses if s in (VerificationStatus.NOT_FOUND, VerificationStatus.NO_SOURCES)
    )

    recs: list[Recommendation] = []
    if contradicted:
        recs.append(Recommendation(
            priority="high",
            action="Review contradicted claims",
            details=(
                f"{contradicted} claim(s) may contain inaccuracies that "
                "contradict source materials."
            ),
        ))
    if unsupported > 2:
        recs.append(Recommendation(
            priority="medium",
            action="Add source citations",
            details=(
                f"{unsupported} claims lack backing in uploaded materials. "
                "Consider adding supporting documents."
            ),
        ))
    if statuses and all(s == VerificationStatus.VERIFIED for s in statuses):
        recs.append(Recommendation(
            priority="low",
            action="Content well-grounded",
            details="All analyzed claims are supported by source materials.",
        ))
    return recs


class SemanticGroundingVerifier:
    """Claim-by-claim comparison of generated content with its sources.

    The content is only read, never modified. Claims are verified one at a
    time so a failing verification degrades that claim alone.
    """

    def __init__(
        self,
        extractor: ClaimExtractor,
        verifier: FactVerifier,
        max_claims: int = MAX_CLAIMS,
    ):
        self.extractor = extractor
        self.verifier = verifier
        self.max_claims = max_claims

    @classmethod
    def from_llm(cls, llm: LLMProvider, max_claims: int = MAX_CLAIMS) -> SemanticGroundingVerifier:
        return cls(ClaimExtractor(llm), FactVerifier(llm), max_claims=max_claims)

    @classmethod
    def from_settings(
        cls, settings: Settings, llm: LLMProvider | None = None,
    ) -> SemanticGroundingVerifier:
        return cls.from_llm(llm or llm_from_settings(settings.llm), settings.grounding.max_claims)

    def analyze(
        self,
        content: str,
        topic: str = "",
        sources: Sequence[Source] = (),
        context: str = "",
    ) -> GroundingAnalysis:
        """Extract claims from ``content`` and verify the important ones.

        Args:
            content: Generated markdown to analyse.
            topic: Topic the content was generated for (reported only).
            sources: Source documents; their ``content`` is the evidence when
                no explicit ``context`` is given.
            context: Retrieval context used during generation.
        """
        logger.info("Semantic grounding for %r (%d sources)", topic, len(sources))

        try:
            claims = self.extractor.extract(content, strict=True)
        except ClaimExtractionFailed as exc:
            logger.warning("Semantic grounding aborted: %s", exc)
            return GroundingAnalysis(
                success=False,
                topic=topic,
                error=str(exc),
                summary=GroundingSummary(
                    overall_grounding_score=NEUTRAL_SCORE,
                    grounding_level=score_level(NEUTRAL_SCORE),
                    message="Semantic grounding analysis failed",
                ),
            )

        if not claims:
            return GroundingAnalysis(
                success=True,
                topic=topic,
                summary=GroundingSummary(message="No verifiable claims found in content"),
            )

        selected = select_claims(claims, self.max_claims)
        comparisons = [
            ClaimComparison(claim=c, verification=self.verifier.verify(c, sources, context))
            for c in selected
        ]

        counts = Counter(c.verification.status for c in comparisons)
        verified = counts[VerificationStatus.VERIFIED]
        partial = counts[VerificationStatus.PARTIALLY_VERIFIED]
        not_found = counts[VerificationStatus.NOT_FOUND] + counts[VerificationStatus.NO_SOURCES]
        contradicted = counts[VerificationStatus.CONTRADICTED]
        processed = len(comparisons)

        has_evidence = bool(sources) or bool(context.strip())
        score = grounding_score(verified, partial, not_found, processed, has_evidence)
        summary = GroundingSummary(
            verified=verified,
            partially_verified=partial,
            not_found=not_found,
            contradicted=contradicted,
            overall_grounding_score=score,
            grounding_level=score_level(score),
            message=summary_message(verified, not_found, contradicted, processed),
        )

        logger.info(
            "Semantic grounding complete: %d/%d claims analysed, score=%d (%s)",
            processed, len(claims), score, summary.grounding_level,
        )
        return GroundingAnalysis(
            success=True,
            topic=topic,
            total_claims=len(claims),
            claims_analyzed=processed,
            comparisons=comparisons,
            summary=summary,
            recommendations=recommendations(comparisons),
        )
