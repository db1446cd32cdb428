"""
Emoji Stripper Stage

Deletes pictographs and the invisible combiners that style them:
- U+1F000-U+1FAFF: emoticons, pictographs, transport, flags, cards
- U+2600-U+27BF: miscellaneous symbols and dingbats
- U+2B00-U+2BFF: arrows and stars used as emoji
- U+FE0E, U+FE0F: text/emoji variation selectors
- U+20E3: combining keycap
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult

EMOJI_PATTERN = re.compile(
    '[\U0001F000-\U0001FAFF\u2600-\u27bf\u2b00-\u2bff\ufe0e\ufe0f\u20e3]'
)


class EmojiStripper(BaseStage):
    """Removes emoji, dingbats and emoji presentation selectors."""

    name = "Emoji Stripper"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, count = EMOJI_PATTERN.subn('', text)
        return StageResult(text=result, changes_made=count)
