"""Score bands and the weighted overall validation score."""

from __future__ import annotations

import math

from edurag.validation.schemas import GroundingReport, OverallScore, QualityReport, SyntaxReport

DEFAULT_WEIGHTS: dict[str, float] = {"syntax": 0.25, "grounding": 0.25, "quality": 0.50}
PASS_THRESHOLD = 70
NEUTRAL_QUALITY = 50.0


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (``round`` would go to even)."""
    return int(math.floor(value + 0.5))


def score_level(score: float) -> str:
    """Map a 0-100 score to its band."""
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Poor"


def syntax_score(syntax: SyntaxReport) -> float:
    if not syntax.has_code or syntax.all_valid or syntax.blocks_checked == 0:
        return 100.0
    return 100.0 * syntax.valid_blocks / syntax.blocks_checked


def quality_score(quality: QualityReport) -> float:
    if not quality.success or quality.overall_score is None:
        return NEUTRAL_QUALITY
    return quality.overall_score / 10 * 100


def weighted_score(
    syntax: float,
    grounding: float,
    quality: float,
    weights: dict[str, float] | None = None,
) -> int:
    w = weights or DEFAULT_WEIGHTS
    return round_half_up(
        syntax * w["syntax"] + grounding * w["grounding"] + quality * w["quality"]
    )


def compute_overall(
    syntax: SyntaxReport,
    grounding: GroundingReport,
    quality: QualityReport,
    weights: dict[str, float] | None = None,
    pass_threshold: int = PASS_THRESHOLD,
) -> OverallScore:
    """Combine the three stage reports into one verdict.

    Passing needs the threshold score, no invalid code block, and no critical
    issue reported by the quality evaluator; any one failing blocks the pass.
    """
    w = dict(weights or DEFAULT_WEIGHTS)
    s_score = syntax_score(syntax)
    g_score = float(grounding.grounding_score)
    q_score = quality_score(quality)

    score = weighted_score(s_score, g_score, q_score, w)
    passes = score >= pass_threshold and syntax.all_valid and not quality.critical_issues

    return OverallScore(
        score=score,
        status=score_level(score),
        passes=passes,
        breakdown={
            "syntax": round_half_up(s_score),
            "grounding": round_half_up(g_score),
            "quality": round_half_up(q_score),
        },
        weights=w,
    )
