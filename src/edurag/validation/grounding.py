"""Citation-based grounding check against the known source documents."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from edurag.sources.base import Source
from edurag.validation.citations import CitationExtractor, RegexCitationExtractor
from edurag.validation.schemas import GroundingReport
from edurag.validation.scoring import round_half_up, score_level

logger = logging.getLogger(__name__)

NO_CITATION_SCORE = 50
NO_SOURCES_SCORE = 100

_LOW_GROUNDING_RECOMMENDATIONS = [
    "Add more citations to uploaded materials",
    "Ensure facts are backed by course content",
    "Review if external sources are necessary",
]


def citation_resolves(label: str, sources: Sequence[Source]) -> bool:
    """True if a source's title or category occurs in ``label`` (case-insensitive)."""
    lowered = label.lower()
    for source in sources:
        title = source.title.lower().strip()
        category = source.category.lower().strip()
        if (title and title in lowered) or (category and category in lowered):
            return True
    return False


class GroundingChecker:
    """Measures how many citation markers resolve to known sources."""

    def __init__(self, extractor: CitationExtractor | None = None):
        self.extractor = extractor or RegexCitationExtractor()

    def check_grounding(self, content: str, known_sources: Sequence[Source]) -> GroundingReport:
        citations = self.extractor.extract(content)
        total = len(citations)
        internal = sum(1 for c in citations if citation_resolves(c, known_sources))

        if not known_sources:
            score = NO_SOURCES_SCORE
        elif total:
            score = round_half_up(internal * 100 / total)
        else:
            score = NO_CITATION_SCORE

        if internal:
            message = (
                f"Content is well-grounded in uploaded materials "
                f"({score}% internal citations)"
            )
        elif known_sources:
            message = "Content lacks proper citations to uploaded materials"
        else:
            message = "No uploaded materials available for grounding"

        logger.info(
            "Grounding check: %d/%d citations resolved (score=%d)", internal, total, score,
        )
        return GroundingReport(
            grounded=internal > 0 or not known_sources,
            grounding_score=score,
            grounding_level=score_level(score),
            total_citations=total,
            internal_citations=internal,
            external_citations=total - internal,
            materials_used=len(known_sources),
            message=message,
            recommendations=list(_LOW_GROUNDING_RECOMMENDATIONS) if score < 60 else [],
        )
