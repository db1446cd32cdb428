"""
Encoding Repairer Stage

Repairs mojibake left behind by mis-decoded extraction, e.g. UTF-8 bytes that
were read as Windows-1252 ("cafÃ©" -> "café", "donâ€™t" -> "don’t").

Uses ftfy's encoding fixer only; quote uncurling, width folding and the other
ftfy.fix_text normalizations are left to the later stages.
"""

import ftfy

from prompt_sanitizer.stages.base import BaseStage, StageResult


class EncodingRepairer(BaseStage):
    """
    Fixes mojibake with ftfy.fix_encoding.

    Runs first so every later stage sees the characters the author intended.
    """

    name = "Encoding Repairer"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        fixed = ftfy.fix_encoding(text)
        changed = fixed != text
        return StageResult(
            text=fixed,
            changes_made=1 if changed else 0,
            metadata={'length_delta': len(text) - len(fixed)},
        )
