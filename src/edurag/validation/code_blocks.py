"""Fenced code block extraction from markdown."""

from __future__ import annotations

import re

from edurag.validation.schemas import CodeBlock

# ```lang\n ... ``` ; the language tag is optional
_FENCE_RE = re.compile(r"```([\w+#.-]+)?[ \t]*\n([\s\S]*?)```")


def extract_code_blocks(markdown: str) -> list[CodeBlock]:
    """Return every fenced code block in document order.

    Blocks without a language tag are reported as ``plaintext``.
    """
    return [
        CodeBlock(
            language=(match.group(1) or "plaintext").lower(),
            code=match.group(2).strip(),
            start_index=match.start(),
        )
        for match in _FENCE_RE.finditer(markdown)
    ]
