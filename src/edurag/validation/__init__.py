"""Validation of generated educational material."""

from edurag.validation.citations import CitationExtractor, RegexCitationExtractor
from edurag.validation.grounding import GroundingChecker
from edurag.validation.quality import QualityEvaluator
from edurag.validation.schemas import (
    BlockResult,
    BlockStatus,
    GroundingReport,
    OverallScore,
    QualityReport,
    RubricScores,
    SyntaxReport,
    ValidationReport,
)
from edurag.validation.scoring import compute_overall, score_level
from edurag.validation.syntax import SyntaxValidator
from edurag.validation.validator import ContentValidator

__all__ = [
    "BlockResult",
    "BlockStatus",
    "CitationExtractor",
    "ContentValidator",
    "GroundingChecker",
    "GroundingReport",
    "OverallScore",
    "QualityEvaluator",
    "QualityReport",
    "RegexCitationExtractor",
    "RubricScores",
    "SyntaxReport",
    "SyntaxValidator",
    "ValidationReport",
    "compute_overall",
    "score_level",
]
