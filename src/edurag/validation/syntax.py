"""Syntax validation of fenced code blocks via external compilers/interpreters.

Each supported language maps to a checker invoked in "syntax only" mode on a
temporary file. A block is valid only when the checker exits 0. Languages
without a checker, or whose toolchain is not installed, are skipped rather
than failed.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

from edurag.validation.code_blocks import extract_code_blocks
from edurag.validation.schemas import BlockResult, BlockStatus, SyntaxReport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

_JAVA_CLASS = re.compile(r"(?:public\s+)?(?:final\s+)?(?:class|interface|enum|record)\s+(\w+)")


@dataclass(frozen=True)
class SyntaxChecker:
    """How to syntax-check one language.

    ``args`` may contain ``{file}`` and ``{workdir}`` placeholders.
    """

    language: str
    executable: str
    args: tuple[str, ...]
    suffix: str

    def file_name(self, code: str) -> str:
        if self.language == "java":
            # javac insists that a public class lives in <ClassName>.java
            match = _JAVA_CLASS.search(code)
            return f"{match.group(1) if match else 'Snippet'}{self.suffix}"
        return f"snippet{self.suffix}"

    def command(self, path: Path) -> list[str]:
        return [
            self.executable,
            *(a.format(file=str(path), workdir=str(path.parent)) for a in self.args),
        ]

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None or Path(self.executable).is_file()


def default_checkers() -> dict[str, SyntaxChecker]:
    """Checkers keyed by every accepted language tag."""
    python = SyntaxChecker("python", sys.executable, ("-m", "py_compile", "{file}"), ".py")
    javascript = SyntaxChecker("javascript", "node", ("--check", "{file}"), ".js")
    java = SyntaxChecker("java", "javac", ("-d", "{workdir}", "{file}"), ".java")
    c = SyntaxChecker("c", "gcc", ("-fsyntax-only", "-Wall", "{file}"), ".c")
    cpp = SyntaxChecker("cpp", "g++", ("-fsyntax-only", "-Wall", "{file}"), ".cpp")
    return {
        "python": python,
        "py": python,
        "javascript": javascript,
        "js": javascript,
        "java": java,
        "c": c,
        "cpp": cpp,
        "c++": cpp,
    }


class SyntaxValidator:
    """Check every fenced code block of a markdown document."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        checkers: dict[str, SyntaxChecker] | None = None,
    ):
        self.timeout = timeout
        self.checkers = checkers if checkers is not None else default_checkers()

    def supported_languages(self) -> list[str]:
        return sorted(self.checkers)

    def validate_code(self, markdown: str) -> SyntaxReport:
        """Extract and check all fenced code blocks in ``markdown``."""
        blocks = extract_code_blocks(markdown)

        if not blocks:
            return SyntaxReport(has_code=False, all_valid=True, message="No code blocks found")

        results = [self.check_block(block.language, block.code) for block in blocks]

        valid = sum(1 for r in results if r.status == BlockStatus.VALID)
        invalid = sum(1 for r in results if r.status == BlockStatus.INVALID)
        skipped = sum(1 for r in results if r.status == BlockStatus.SKIPPED)

        if invalid:
            message = f"{invalid} code block(s) have syntax errors"
        else:
            message = f"All {valid} checked code block(s) have valid syntax"

        logger.info(
            "Syntax check: %d blocks (%d valid, %d invalid, %d skipped)",
            len(blocks), valid, invalid, skipped,
        )
        return SyntaxReport(
            has_code=True,
            blocks_checked=len(blocks),
            valid_blocks=valid,
            invalid_blocks=invalid,
            skipped_blocks=skipped,
            results=results,
            all_valid=invalid == 0,
            message=message,
        )

    def check_block(self, language: str, code: str) -> BlockResult:
        """Run the checker registered for ``language`` over ``code``."""
        checker = self.checkers.get(language.lower())
        if checker is None:
            return BlockResult(
                language=language,
                status=BlockStatus.SKIPPED,
                message=f"Syntax validation not supported for {language}",
            )
        if not checker.is_available():
            logger.debug("Checker %s for %s not installed", checker.executable, language)
            return BlockResult(
                language=checker.language,
                status=BlockStatus.SKIPPED,
                message=f"{checker.executable} not available to check {checker.language}",
            )

        with tempfile.TemporaryDirectory(prefix="edurag-syntax-") as workdir:
            path = Path(workdir) / checker.file_name(code)
            path.write_text(code, encoding="utf-8")
            try:
                proc = subprocess.run(
                    checker.command(path),
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    cwd=workdir,
                )
            except subprocess.TimeoutExpired:
                return BlockResult(
                    language=checker.language,
                    status=BlockStatus.INVALID,
                    message=f"{checker.language} syntax check timed out",
                    diagnostic=f"{checker.executable} did not finish within {self.timeout}s",
                )
            except OSError as exc:
                return BlockResult(
                    language=checker.language,
                    status=BlockStatus.SKIPPED,
                    message=f"Could not run {checker.executable}: {exc}",
                )

        if proc.returncode == 0:
            return BlockResult(
                language=checker.language,
                status=BlockStatus.VALID,
                message=f"{checker.language} syntax is valid",
            )

        return BlockResult(
            language=checker.language,
            status=BlockStatus.INVALID,
            message=f"{checker.language} syntax error",
            diagnostic=proc.stderr or proc.stdout,
        )
