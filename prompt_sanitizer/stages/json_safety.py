"""
JSON Safety Stage

Makes text safe to embed in a JSON request body:
- CRLF and lone CR become LF
- C0 control bytes other than newline and tab are deleted, as is DEL
- Lone surrogates (U+D800-U+DFFF) are deleted; they cannot be UTF-8 encoded

Tabs survive here and are collapsed to spaces by the compose stage.
"""

from prompt_sanitizer.stages.base import BaseStage, StageResult
from prompt_sanitizer.utils.text_utils import (
    CONTROL_CHARS_PATTERN,
    LINE_ENDING_PATTERN,
    SURROGATE_PATTERN,
)


class JsonSafetyEscaper(BaseStage):
    """Normalizes line endings and drops control bytes and lone surrogates."""

    name = "JSON Safety Escaper"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, line_endings = LINE_ENDING_PATTERN.subn('\n', text)
        result, controls = CONTROL_CHARS_PATTERN.subn('', result)
        result, surrogates = SURROGATE_PATTERN.subn('', result)

        return StageResult(
            text=result,
            changes_made=line_endings + controls + surrogates,
            metadata={
                'line_endings': line_endings,
                'control_chars': controls,
                'surrogates': surrogates,
            },
        )
