"""Prompt templates for rubric-based quality evaluation."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

MAX_CONTENT_CHARS = 3000

QUALITY_SYSTEM_PROMPT = (
    "You are an expert academic evaluator. Return ONLY valid JSON, no markdown formatting."
)

QUALITY_TEMPLATE = """\
You are an expert academic content evaluator. Evaluate the following \
AI-generated educational material using a strict rubric.

**Topic:** {topic}
**Type:** {material_type}
**Content Length:** {length} characters

**Material to Evaluate:**
```markdown
{content}
```

**Syntax Validation Results:**
{syntax}

**Content Grounding Results:**
{grounding}

**EVALUATION RUBRIC** (Score each category 0-10):

1. **Correctness**: factual accuracy, technical correctness, no misleading information
2. **Relevance**: addresses the topic directly, stays on-topic, appropriate depth for {material_type}
3. **Completeness**: covers key concepts, includes examples, has proper structure
4. **Clarity**: well-organized, easy to understand, good explanations
5. **Academic Rigor**: proper citations, evidence-based, meets educational standards
6. **Practical Value**: useful for learning, actionable, real-world applicability

**OUTPUT FORMAT (JSON only, no markdown):**
{{
  "scores": {{
    "correctness": <0-10>,
    "relevance": <0-10>,
    "completeness": <0-10>,
    "clarity": <0-10>,
    "academicRigor": <0-10>,
    "practicalValue": <0-10>
  }},
  "overallScore": <average 0-10>,
  "strengths": ["<strength>"],
  "weaknesses": ["<weakness>"],
  "recommendations": ["<recommendation>"],
  "criticalIssues": ["<issue>"] or [],
  "passesQualityCheck": <true/false>
}}
"""


def truncate(content: str, limit: int = MAX_CONTENT_CHARS) -> str:
    if len(content) <= limit:
        return content
    return content[:limit] + "\n... (truncated)"


def _as_json(report: Any) -> str:
    return json.dumps(asdict(report), indent=2, default=str)


def build_quality_prompt(
    content: str,
    topic: str,
    material_type: str,
    syntax: Any,
    grounding: Any,
) -> str:
    """Fill the rubric template with the material and earlier stage reports."""
    return QUALITY_TEMPLATE.format(
        topic=topic,
        material_type=material_type,
        length=len(content),
        content=truncate(content),
        syntax=_as_json(syntax),
        grounding=_as_json(grounding),
    )
