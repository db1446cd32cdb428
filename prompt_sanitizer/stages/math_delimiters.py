"""
Math Delimiter Stripper Stage

Replaces delimited TeX math with an "[equation]" placeholder:
- $$...$$ and \\[...\\] display math
- \\(...\\) inline math
- $...$ inline math (1-200 characters on one line)

A single-dollar span may not open with whitespace, close after whitespace or
be followed by a digit, so prices ("$5 and $10") are not mistaken for math.
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult

EQUATION_PLACEHOLDER = " [equation] "


class MathDelimiterStripper(BaseStage):
    """Replaces $...$, $$...$$, \\(...\\) and \\[...\\] spans with [equation]."""

    name = "Math Delimiter Stripper"

    DISPLAY_DOLLAR_PATTERN = re.compile(r'\$\$.*?\$\$', re.DOTALL)
    PAREN_PATTERN = re.compile(r'\\\(.*?\\\)', re.DOTALL)
    BRACKET_PATTERN = re.compile(r'\\\[.*?\\\]', re.DOTALL)
    INLINE_DOLLAR_PATTERN = re.compile(r'\$(?!\s)[^$\n]{1,200}(?<!\s)\$(?!\d)')

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        changes = 0
        result = text
        for pattern in (
            self.DISPLAY_DOLLAR_PATTERN,
            self.PAREN_PATTERN,
            self.BRACKET_PATTERN,
            self.INLINE_DOLLAR_PATTERN,
        ):
            result, count = pattern.subn(EQUATION_PLACEHOLDER, result)
            changes += count

        return StageResult(text=result, changes_made=changes)
