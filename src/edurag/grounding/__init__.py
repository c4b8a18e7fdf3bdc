"""Claim-level semantic grounding of generated content against sources."""

from edurag.grounding.analyzer import SemanticGroundingVerifier
from edurag.grounding.claims import ClaimExtractor
from edurag.grounding.schemas import (
    Claim,
    ClaimComparison,
    ClaimVerification,
    GroundingAnalysis,
    GroundingSummary,
    Importance,
    Recommendation,
    VerificationStatus,
)
from edurag.grounding.verifier import FactVerifier

__all__ = [
    "Claim",
    "ClaimComparison",
    "ClaimExtractor",
    "ClaimVerification",
    "FactVerifier",
    "GroundingAnalysis",
    "GroundingSummary",
    "Importance",
    "Recommendation",
    "SemanticGroundingVerifier",
    "VerificationStatus",
]
