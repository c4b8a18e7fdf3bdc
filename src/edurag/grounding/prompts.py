"""Prompt templates for claim extraction and fact verification."""

from __future__ import annotations

MAX_CONTENT_CHARS = 4000
MAX_CONTEXT_CHARS = 3000

EXTRACTION_SYSTEM_PROMPT = (
    "You are a fact extraction expert. Return ONLY valid JSON, no markdown formatting."
)

EXTRACTION_TEMPLATE = """\
Analyze the following educational content and extract all factual claims, \
definitions, and technical statements that can be verified.

**Content to Analyze:**
{content}

**Instructions:**
1. Extract ONLY verifiable factual claims (not opinions or general statements)
2. Focus on: definitions, technical facts, code explanations, algorithm descriptions
3. Keep each claim concise (1-2 sentences max)
4. Include the approximate location (beginning/middle/end of content)

**OUTPUT FORMAT (JSON only, no markdown):**
{{
  "claims": [
    {{
      "id": 1,
      "claim": "<the factual claim>",
      "type": "<definition|technical_fact|algorithm|code_explanation|example>",
      "importance": "<high|medium|low>",
      "location": "<beginning|middle|end>"
    }}
  ]
}}
"""

VERIFICATION_SYSTEM_PROMPT = (
    "You are a meticulous fact-checker. Return ONLY valid JSON, no markdown."
)

VERIFICATION_TEMPLATE = """\
You are a fact-checking expert. Verify if the following claim is supported \
by the source materials.

**CLAIM TO VERIFY:**
"{claim}"

**SOURCE MATERIALS:**
{context}

**Instructions:**
1. Search for facts in the source materials that support, contradict, or relate to the claim
2. If found, quote the relevant fact EXACTLY as it appears in the source
3. Assess confidence level based on how well the source supports the claim

**OUTPUT FORMAT (JSON only):**
{{
  "found": <true|false>,
  "matchedFact": "<exact quote from source or null>",
  "source": "<source title/name or null>",
  "confidence": <0-100>,
  "verificationStatus": "<verified|partially_verified|not_found|contradicted>",
  "explanation": "<brief explanation of the match or mismatch>",
  "discrepancy": "<any difference between claim and fact, or null>"
}}
"""


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "\n... (truncated)"


def build_extraction_prompt(content: str) -> str:
    return EXTRACTION_TEMPLATE.format(content=truncate(content, MAX_CONTENT_CHARS))


def build_verification_prompt(claim: str, context: str) -> str:
    return VERIFICATION_TEMPLATE.format(
        claim=claim, context=truncate(context, MAX_CONTEXT_CHARS),
    )
