"""Data models for claim-level semantic grounding."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class VerificationStatus(StrEnum):
    """How well a claim is supported by the source material."""

    VERIFIED = "verified"
    PARTIALLY_VERIFIED = "partially_verified"
    NOT_FOUND = "not_found"
    CONTRADICTED = "contradicted"
    NO_SOURCES = "no_sources"

    @classmethod
    def coerce(cls, value: Any) -> VerificationStatus:
        """Map free-form model output onto the enum; anything unknown is ``NOT_FOUND``."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NOT_FOUND


class Importance(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Claim:
    """A discrete, independently checkable statement from generated content."""

    id: int
    text: str
    type: str = "technical_fact"
    importance: Importance = Importance.MEDIUM
    location: str = ""


@dataclass
class ClaimVerification:
    claim_id: int
    status: VerificationStatus
    confidence: int = 0
    matched_fact: str | None = None
    source_label: str | None = None
    explanation: str = ""
    discrepancy: str | None = None


@dataclass
class ClaimComparison:
    """A generated claim next to what the sources say about it."""

    claim: Claim
    verification: ClaimVerification


@dataclass
class GroundingSummary:
    verified: int = 0
    partially_verified: int = 0
    not_found: int = 0
    contradicted: int = 0
    overall_grounding_score: int = 100
    grounding_level: str = "Excellent"
    message: str = ""


@dataclass(frozen=True)
class Recommendation:
    priority: str
    action: str
    details: str


@dataclass
class GroundingAnalysis:
    """Result of extracting and verifying the claims of one piece of content.

    ``success`` is ``False`` only when claim extraction itself failed; the
    summary score is then 0.
    """

    success: bool
    topic: str = ""
    total_claims: int = 0
    claims_analyzed: int = 0
    comparisons: list[ClaimComparison] = field(default_factory=list)
    summary: GroundingSummary = field(default_factory=GroundingSummary)
    recommendations: list[Recommendation] = field(default_factory=list)
    error: str | None = None
    analyzed_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["analyzed_at"] = self.analyzed_at.isoformat()
        return data
