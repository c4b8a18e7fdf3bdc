"""Full validation of generated material: syntax, grounding, quality, overall."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from edurag.config import Settings
from edurag.llm.base import LLMProvider
from edurag.llm.factory import llm_from_settings
from edurag.sources.base import Source
from edurag.validation.grounding import GroundingChecker
from edurag.validation.quality import QualityEvaluator
from edurag.validation.schemas import ValidationReport
from edurag.validation.scoring import DEFAULT_WEIGHTS, PASS_THRESHOLD, compute_overall
from edurag.validation.syntax import SyntaxValidator

logger = logging.getLogger(__name__)


class ContentValidator:
    """Runs the three validation stages in order and aggregates them.

    Re-running on the same content with the same sources and the same model
    responses produces the same report (apart from timestamps).
    """

    def __init__(
        self,
        llm: LLMProvider,
        syntax_validator: SyntaxValidator | None = None,
        grounding_checker: GroundingChecker | None = None,
        quality_evaluator: QualityEvaluator | None = None,
        weights: dict[str, float] | None = None,
        pass_threshold: int = PASS_THRESHOLD,
    ):
        self.syntax_validator = syntax_validator or SyntaxValidator()
        self.grounding_checker = grounding_checker or GroundingChecker()
        self.quality_evaluator = quality_evaluator or QualityEvaluator(llm)
        self.weights = dict(weights or DEFAULT_WEIGHTS)
        self.pass_threshold = pass_threshold

    @classmethod
    def from_settings(cls, settings: Settings, llm: LLMProvider | None = None) -> ContentValidator:
        llm = llm or llm_from_settings(settings.llm)
        return cls(
            llm,
            syntax_validator=SyntaxValidator(timeout=settings.validation.syntax_timeout),
            quality_evaluator=QualityEvaluator(
                llm,
                max_tokens=settings.llm.max_tokens,
                temperature=settings.llm.temperature,
            ),
            weights=settings.validation.weights,
            pass_threshold=settings.validation.pass_threshold,
        )

    def validate(
        self,
        content: str,
        topic: str,
        material_type: str = "Theory",
        sources: Sequence[Source] = (),
    ) -> ValidationReport:
        """Validate one piece of generated markdown.

        Args:
            content: The generated material.
            topic: The topic it was generated for.
            material_type: Kind of material (e.g. ``Theory`` or ``Lab``).
            sources: Known source documents citations may resolve to.
        """
        logger.info("Validating %s material on %r (%d chars)", material_type, topic, len(content))

        syntax = self.syntax_validator.validate_code(content)
        grounding = self.grounding_checker.check_grounding(content, list(sources))
        quality = self.quality_evaluator.evaluate(content, topic, material_type, syntax, grounding)
        overall = compute_overall(
            syntax, grounding, quality,
            weights=self.weights,
            pass_threshold=self.pass_threshold,
        )

        logger.info(
            "Validation complete: score=%d status=%s passes=%s",
            overall.score, overall.status, overall.passes,
        )
        return ValidationReport(
            topic=topic,
            material_type=material_type,
            syntax=syntax,
            grounding=grounding,
            quality=quality,
            overall=overall,
        )
