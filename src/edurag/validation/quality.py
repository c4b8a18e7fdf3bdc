"""Rubric-based quality evaluation through a language model."""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from edurag.errors import QualityEvaluationFailed
from edurag.llm.base import LLMProvider
from edurag.llm.structured import parse_json_response
from edurag.validation.prompts import QUALITY_SYSTEM_PROMPT, build_quality_prompt
from edurag.validation.schemas import (
    GroundingReport,
    QualityReport,
    RubricScores,
    SyntaxReport,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Response model
# ---------------------------------------------------------------------------

class _RubricPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correctness: float = Field(default=0.0, ge=0, le=10)
    relevance: float = Field(default=0.0, ge=0, le=10)
    completeness: float = Field(default=0.0, ge=0, le=10)
    clarity: float = Field(default=0.0, ge=0, le=10)
    academic_rigor: float = Field(default=0.0, ge=0, le=10, alias="academicRigor")
    practical_value: float = Field(default=0.0, ge=0, le=10, alias="practicalValue")


class QualityPayload(BaseModel):
    """Shape of the JSON the evaluator model is asked to return."""

    model_config = ConfigDict(populate_by_name=True)

    scores: _RubricPayload
    overall_score: float | None = Field(default=None, ge=0, le=10, alias="overallScore")
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    critical_issues: list[str] = Field(default_factory=list, alias="criticalIssues")
    passes_quality_check: bool | None = Field(default=None, alias="passesQualityCheck")


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class QualityEvaluator:
    """Scores generated material on six 0-10 rubric dimensions.

    Failures of the language model (transport errors, malformed output) are
    reported as ``QualityReport(success=False)`` instead of raised, so the
    overall validation can still complete with a neutral quality score.
    """

    def __init__(self, llm: LLMProvider, max_tokens: int = 1000, temperature: float = 0.3):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    def evaluate(
        self,
        content: str,
        topic: str,
        material_type: str,
        syntax: SyntaxReport,
        grounding: GroundingReport,
        strict: bool = False,
    ) -> QualityReport:
        """Score ``content``; with ``strict`` a failure raises ``QualityEvaluationFailed``."""
        prompt = build_quality_prompt(content, topic, material_type, syntax, grounding)
        try:
            raw = self.llm.generate(
                prompt,
                system=QUALITY_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            payload = parse_json_response(raw, QualityPayload)
        except Exception as exc:
            if strict:
                raise QualityEvaluationFailed(f"Quality evaluation failed: {exc}") from exc
            logger.warning("Quality evaluation failed: %s", exc)
            return QualityReport(success=False, error=str(exc))

        scores = RubricScores(**payload.scores.model_dump())
        overall = payload.overall_score if payload.overall_score is not None else scores.mean()

        logger.info("Quality evaluation complete: overall %.1f/10", overall)
        return QualityReport(
            success=True,
            scores=scores,
            overall_score=overall,
            strengths=payload.strengths,
            weaknesses=payload.weaknesses,
            recommendations=payload.recommendations,
            critical_issues=payload.critical_issues,
            passes_quality_check=payload.passes_quality_check,
            evaluated_at=datetime.now(),
        )
