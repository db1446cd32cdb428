"""
ASCII Folder Stage

Only part of the pipeline when aggressive_unicode is requested. Accented
letters and other transliterable characters are converted with unidecode
("café" -> "cafe", "Straße" -> "Strasse"); whatever is still outside ASCII
afterwards is deleted.
"""

import re

from unidecode import unidecode

from prompt_sanitizer.stages.base import BaseStage, StageResult

NON_ASCII_PATTERN = re.compile(r'[^\x00-\x7f]')


class AsciiFolder(BaseStage):
    """Transliterates to ASCII and drops the rest."""

    name = "ASCII Folder"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        non_ascii = len(NON_ASCII_PATTERN.findall(text))
        if not non_ascii:
            return StageResult(text=text)

        result = NON_ASCII_PATTERN.sub('', unidecode(text))
        return StageResult(
            text=result,
            changes_made=non_ascii,
            metadata={'non_ascii_chars': non_ascii},
        )
