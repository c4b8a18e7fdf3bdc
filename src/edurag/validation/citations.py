"""Citation marker extraction from generated content.

Extraction sits behind ``CitationExtractor`` so the regex heuristic can be
swapped for structured model output without touching grounding scores.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

# Matches [Source: Data Structures - Lecture Notes]
_SOURCE_RE = re.compile(r"\[Source:\s*([^\]]+)\]", re.IGNORECASE)


class CitationExtractor(ABC):
    """Interface for pulling citation labels out of generated text."""

    @abstractmethod
    def extract(self, content: str) -> list[str]:
        """Return citation labels in order of appearance (duplicates kept)."""


class RegexCitationExtractor(CitationExtractor):
    """Finds ``[Source: <label>]`` markers."""

    def __init__(self, pattern: re.Pattern[str] = _SOURCE_RE):
        self.pattern = pattern

    def extract(self, content: str) -> list[str]:
        labels = (m.group(1).strip() for m in self.pattern.finditer(content))
        return [label for label in labels if label]
