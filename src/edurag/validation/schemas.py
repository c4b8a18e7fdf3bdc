"""Data models for generated-content validation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class BlockStatus(StrEnum):
    """Outcome of checking one fenced code block."""

    VALID = "valid"
    INVALID = "invalid"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block found in markdown."""

    language: str
    code: str
    start_index: int


@dataclass
class BlockResult:
    """Result of running a syntax checker over one code block."""

    language: str
    status: BlockStatus
    message: str
    diagnostic: str | None = None

    @property
    def valid(self) -> bool | None:
        """``True``/``False`` for checked blocks, ``None`` when skipped."""
        if self.status == BlockStatus.SKIPPED:
            return None
        return self.status == BlockStatus.VALID


@dataclass
class SyntaxReport:
    has_code: bool
    blocks_checked: int = 0
    valid_blocks: int = 0
    invalid_blocks: int = 0
    skipped_blocks: int = 0
    results: list[BlockResult] = field(default_factory=list)
    all_valid: bool = True
    message: str = ""


@dataclass
class GroundingReport:
    grounded: bool
    grounding_score: int
    grounding_level: str
    total_citations: int = 0
    internal_citations: int = 0
    external_citations: int = 0
    materials_used: int = 0
    message: str = ""
    recommendations: list[str] = field(default_factory=list)


@dataclass
class RubricScores:
    """Six rubric dimensions, each scored 0-10."""

    correctness: float = 0.0
    relevance: float = 0.0
    completeness: float = 0.0
    clarity: float = 0.0
    academic_rigor: float = 0.0
    practical_value: float = 0.0

    def mean(self) -> float:
        values = list(asdict(self).values())
        return sum(values) / len(values)


@dataclass
class QualityReport:
    """Rubric evaluation from the language model.

    ``success`` is ``False`` when the evaluation could not be obtained; the
    overall score is then ``None`` and aggregation uses a neutral default.
    """

    success: bool
    scores: RubricScores = field(default_factory=RubricScores)
    overall_score: float | None = None
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    critical_issues: list[str] = field(default_factory=list)
    passes_quality_check: bool | None = None
    error: str | None = None
    evaluated_at: datetime | None = None


@dataclass
class OverallScore:
    score: int
    status: str
    passes: bool
    breakdown: dict[str, int]
    weights: dict[str, float]


@dataclass
class ValidationReport:
    """Complete validation of one piece of generated content."""

    topic: str
    material_type: str
    syntax: SyntaxReport
    grounding: GroundingReport
    quality: QualityReport
    overall: OverallScore
    validated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["validated_at"] = self.validated_at.isoformat()
        if self.quality.evaluated_at is not None:
            data["quality"]["evaluated_at"] = self.quality.evaluated_at.isoformat()
        return data
