"""Tests for fenced-code extraction and external syntax checking."""

from __future__ import annotations

import shutil
import sys
import textwrap

import pytest

from edurag.validation import BlockStatus, SyntaxValidator
from edurag.validation.code_blocks import extract_code_blocks
from edurag.validation.syntax import SyntaxChecker, default_checkers

VALID_PY = "```python\ndef area(r):\n    return 3.14 * r * r\n```"
INVALID_PY = "```python\nprint((1 + 2)\n```"


# ---------------------------------------------------------------------------
# Code block extraction
# ---------------------------------------------------------------------------


class TestExtractCodeBlocks:
    def test_language_tags(self):
        md = textwrap.dedent("""\
            Intro text.

            ```Python
            x = 1
            ```

            ```
            plain
            ```

            ```c++
            int main() {}
            ```
        """)
        blocks = extract_code_blocks(md)
        assert [b.language for b in blocks] == ["python", "plaintext", "c++"]
        assert blocks[0].code == "x = 1"

    def test_no_blocks(self):
        assert extract_code_blocks("No code here, only `inline` spans.") == []


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestSyntaxValidator:
    @pytest.fixture
    def validator(self) -> SyntaxValidator:
        return SyntaxValidator(timeout=30)

    def test_no_code(self, validator: SyntaxValidator):
        report = validator.validate_code("# Heading\n\nJust prose.")
        assert report.has_code is False
        assert report.all_valid is True
        assert report.blocks_checked == 0

    def test_valid_python(self, validator: SyntaxValidator):
        report = validator.validate_code(VALID_PY)
        assert report.has_code
        assert report.valid_blocks == 1
        assert report.all_valid
        assert report.results[0].valid is True

    def test_invalid_python(self, validator: SyntaxValidator):
        report = validator.validate_code(f"Here is a broken snippet:\n\n{INVALID_PY}\n")

        assert report.blocks_checked == 1
        assert report.invalid_blocks == 1
        assert report.all_valid is False
        result = report.results[0]
        assert result.status == BlockStatus.INVALID
        assert result.valid is False
        assert result.diagnostic

    def test_unknown_language_skipped(self, validator: SyntaxValidator):
        report = validator.validate_code("```haskell\nmain = putStrLn \"hi\"\n```")
        assert report.skipped_blocks == 1
        assert report.invalid_blocks == 0
        assert report.all_valid
        assert report.results[0].valid is None

    def test_mixed_blocks(self, validator: SyntaxValidator):
        report = validator.validate_code(f"{VALID_PY}\n\n{INVALID_PY}\n\n```sql\nSELECT 1;\n```")
        assert (report.valid_blocks, report.invalid_blocks, report.skipped_blocks) == (1, 1, 1)
        assert report.blocks_checked == 3
        assert not report.all_valid

    def test_missing_toolchain_skipped(self):
        checker = SyntaxChecker("python", "definitely-not-installed-xyz", ("{file}",), ".py")
        validator = SyntaxValidator(checkers={"python": checker})
        report = validator.validate_code(VALID_PY)
        assert report.results[0].status == BlockStatus.SKIPPED
        assert report.all_valid

    def test_timeout_is_invalid(self):
        sleeper = SyntaxChecker(
            "python", sys.executable, ("-c", "import time; time.sleep(5)", "{file}"), ".py",
        )
        validator = SyntaxValidator(timeout=0.2, checkers={"python": sleeper})
        result = validator.check_block("python", "x = 1")
        assert result.status == BlockStatus.INVALID
        assert "timed out" in result.message

    def test_supported_languages(self, validator: SyntaxValidator):
        assert {"python", "javascript", "java", "c", "cpp"} <= set(validator.supported_languages())

    @pytest.mark.skipif(shutil.which("node") is None, reason="node not installed")
    def test_javascript(self, validator: SyntaxValidator):
        assert validator.check_block("js", "const x = () => 1;").status == BlockStatus.VALID
        assert validator.check_block("javascript", "const = ;").status == BlockStatus.INVALID

    @pytest.mark.skipif(shutil.which("gcc") is None, reason="gcc not installed")
    def test_c(self, validator: SyntaxValidator):
        assert validator.check_block("c", "int main(void) { return 0; }").status == BlockStatus.VALID
        assert validator.check_block("c", "int main( { return 0 }").status == BlockStatus.INVALID

    @pytest.mark.skipif(shutil.which("javac") is None, reason="javac not installed")
    def test_java_uses_class_file_name(self, validator: SyntaxValidator):
        code = "public class Greeter { public static void main(String[] a) {} }"
        assert validator.check_block("java", code).status == BlockStatus.VALID


class TestCheckers:
    def test_java_file_name(self):
        java = default_checkers()["java"]
        assert java.file_name("public class Stack<T> {}") == "Stack.java"
        assert java.file_name("int x;") == "Snippet.java"

    def test_aliases_share_checker(self):
        checkers = default_checkers()
        assert checkers["py"] is checkers["python"]
        assert checkers["c++"] is checkers["cpp"]
