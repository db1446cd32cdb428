"""
Length Capper Stage

Bounds the prompt excerpt to max_length characters. A cut at the last
sentence or line boundary is preferred when that boundary keeps more than
80% of the budget; otherwise the text is hard-cut and "..." appended, so
the result is never longer than max_length + 3.
"""

from prompt_sanitizer.config import (
    DEFAULT_MAX_LENGTH,
    TRUNCATION_BOUNDARY_RATIO,
    TRUNCATION_ELLIPSIS,
)
from prompt_sanitizer.stages.base import BaseStage, StageResult


class LengthCapper(BaseStage):
    """
    Truncates text to a maximum length at a natural boundary when possible.

    Example (max_length=20):
        "First sentence here. Second one is longer." -> "First sentence here."
    """

    name = "Length Capper"

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH):
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self.max_length = max_length

    def process(self, text: str) -> StageResult:
        if len(text) <= self.max_length:
            return StageResult(text=text)

        head = text[:self.max_length]
        boundary = max(head.rfind('.'), head.rfind('\n'))

        if boundary > self.max_length * TRUNCATION_BOUNDARY_RATIO:
            result = head[:boundary + 1].rstrip()
            mode = 'boundary'
        else:
            result = head + TRUNCATION_ELLIPSIS
            mode = 'hard'

        return StageResult(
            text=result,
            changes_made=1,
            metadata={'mode': mode, 'removed_chars': len(text) - len(head)},
        )
