"""
Code Stripper Stage

Source code pasted into a selection is noise for reading-comprehension
prompts. Fenced blocks collapse to a "[code block]" placeholder so the model
still knows code was there; inline spans and indented code are dropped.

Patterns handled:
- ```python\\n...\\n``` and ```...``` fenced blocks
- A leftover unpaired ``` fence
- `inline` spans
- Lines indented by four or more spaces
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult

CODE_BLOCK_PLACEHOLDER = " [code block] "


class CodeStripper(BaseStage):
    """Replaces fenced code with a placeholder and removes inline/indented code."""

    name = "Code Stripper"

    # Fence with an optional language tag on its opening line
    FENCED_BLOCK_PATTERN = re.compile(r'```[^\n`]*\n.*?```', re.DOTALL)
    # Fence pair without a language line, possibly on one line
    BARE_FENCE_PATTERN = re.compile(r'```.*?```', re.DOTALL)
    STRAY_FENCE_PATTERN = re.compile(r'```')
    INLINE_CODE_PATTERN = re.compile(r'`[^`\n]+`')
    INDENTED_LINE_PATTERN = re.compile(r'^ {4,}\S.*(?:\n|$)', re.MULTILINE)

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, fenced = self.FENCED_BLOCK_PATTERN.subn(CODE_BLOCK_PLACEHOLDER, text)
        result, bare = self.BARE_FENCE_PATTERN.subn(CODE_BLOCK_PLACEHOLDER, result)
        result, stray = self.STRAY_FENCE_PATTERN.subn('', result)
        result, inline = self.INLINE_CODE_PATTERN.subn(' ', result)
        result, indented = self.INDENTED_LINE_PATTERN.subn('', result)

        return StageResult(
            text=result,
            changes_made=fenced + bare + stray + inline + indented,
            metadata={
                'code_blocks': fenced + bare,
                'inline_spans': inline,
                'indented_lines': indented,
            },
        )
