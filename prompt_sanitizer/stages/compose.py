"""
Final Compose Stage

Whitespace normalization plus removal of repeated lines, the same transform
exposed as utils.clean_to_prompt_ready.

Tag markup is stripped once more first. Stages after the HTML decoder delete
characters outright (stray braces, citation markers, fences, emoji), which
can close up text like "<{b>" into "<b>".
"""

from prompt_sanitizer.stages.base import BaseStage, StageResult
from prompt_sanitizer.utils.text_utils import TAG_PATTERN, clean_to_prompt_ready


class FinalComposer(BaseStage):
    """Removes re-formed tags, collapses whitespace and drops duplicate lines."""

    name = "Final Composer"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, tags = TAG_PATTERN.subn(' ', text)
        result = clean_to_prompt_ready(result)
        return StageResult(
            text=result,
            changes_made=1 if result != text else 0,
            metadata={'length_delta': len(text) - len(result), 'tags': tags},
        )
