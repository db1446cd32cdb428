"""
Invisible Character Stripper Stage

Deletes code points that render as nothing but still reach the model:
zero-width spaces and joiners, word joiner, BOM, soft hyphen and the bidi
embedding/override/isolate controls.
"""

from prompt_sanitizer.stages.base import BaseStage, StageResult
from prompt_sanitizer.utils.text_utils import INVISIBLE_CHARS_PATTERN


class InvisibleCharStripper(BaseStage):
    """Removes zero-width, soft hyphen and bidi control characters."""

    name = "Invisible Char Stripper"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, count = INVISIBLE_CHARS_PATTERN.subn('', text)
        return StageResult(text=result, changes_made=count)
