"""
Table Artifact Stripper Stage

Removes the scaffolding of ASCII and Markdown tables while keeping the cell
text readable.

Example input:
    +------+-------+
    | Name | Score |
    |------|-------|
    | Ada  | 97    |

Example output:
     Name   Score
     Ada   97

A '+' is only treated as a table junction when it touches other table
formatting ('+---', '-+-', '|+'), so "C++", "2H2 + O2" and "+/-" survive.
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult

FORMAT_CHARS = frozenset('-=|:+')


class TableStripper(BaseStage):
    """Drops separator rows and pipe-heavy rows, then removes cell borders."""

    name = "Table Stripper"

    SEPARATOR_LINE_PATTERN = re.compile(r'[-=|:+\s]+')
    # Only junction '+' is replaced: the Unicode math stage later writes '±' as
    # "+/-", and a second run must not strip that '+' again
    JUNCTION_PATTERN = re.compile(r'(?<=[-=|:])\+|\+(?=[-=|:])')

    # Rows with more pipes than this are candidates for dropping
    MAX_PIPES = 3
    # ...when formatting characters exceed this share of the row
    MAX_FORMAT_RATIO = 0.7

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        kept: list[str] = []
        dropped = 0
        rewritten = 0

        for line in text.split('\n'):
            trimmed = line.strip()
            if trimmed and self.SEPARATOR_LINE_PATTERN.fullmatch(trimmed):
                dropped += 1
                continue
            if line.count('|') > self.MAX_PIPES and self._format_ratio(line) > self.MAX_FORMAT_RATIO:
                dropped += 1
                continue

            new_line = self.JUNCTION_PATTERN.sub(' ', line).replace('|', ' ')
            if new_line != line:
                rewritten += 1
            kept.append(new_line)

        return StageResult(
            text='\n'.join(kept),
            changes_made=dropped + rewritten,
            metadata={'dropped_lines': dropped, 'rewritten_lines': rewritten},
        )

    @staticmethod
    def _format_ratio(line: str) -> float:
        formatting = sum(1 for ch in line if ch in FORMAT_CHARS or ch.isspace())
        return formatting / len(line)
