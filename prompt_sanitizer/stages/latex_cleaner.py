"""
LaTeX Cleaner Stage

Wikipedia and arXiv selections carry TeX source next to (or instead of) the
rendered math, e.g. "{\\displaystyle \\mathbf {u} }". This stage removes it:

1. {\\displaystyle ...} blocks (brace-balanced) -> [equation]
2. \\begin{env}...\\end{env} environments -> [equation]
3. \\command[opt]{arg} -> space
4. Nested braces, innermost first, for up to five passes:
   braces still holding a command -> [math], plain braces -> space
5. Leftover commands, backslashes and braces are deleted
6. Lines that are now equation debris are dropped (see LineFilterHeuristics)
"""

import re
from dataclasses import dataclass, fields

from prompt_sanitizer.config import get_heuristics_section
from prompt_sanitizer.stages.base import BaseStage, StageResult

EQUATION_PLACEHOLDER = " [equation] "
MATH_PLACEHOLDER = " [math] "

DISPLAYSTYLE_TOKEN = '{\\displaystyle'

PLACEHOLDER_PATTERN = re.compile(r'\[(?:equation|math|code block)\]')
# A word of two or more letters in any script
WORD_PATTERN = re.compile(r'[^\W\d_]{2,}')


@dataclass(frozen=True)
class LineFilterHeuristics:
    """
    Thresholds of the line-level quality filter.

    Loaded from the 'latex_line_filter' section of the heuristics YAML;
    missing keys keep these defaults.
    """
    min_line_length: int = 3
    min_letter_ratio: float = 0.25
    ratio_min_length: int = 15
    max_equation_placeholders: int = 4

    @classmethod
    def from_config(cls, **overrides) -> 'LineFilterHeuristics':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in get_heuristics_section('latex_line_filter').items() if k in known}
        values.update(overrides)
        return cls(**values)


def _find_closing_brace(text: str, start: int) -> int | None:
    """Return the index of the brace closing the one at `start`, or None."""
    depth = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch == '\\':
            i += 2  # escaped character, e.g. \{ or \}
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


class LatexCleaner(BaseStage):
    """Removes TeX markup and drops the lines it leaves behind as debris."""

    name = "LaTeX Cleaner"

    ENVIRONMENT_PATTERN = re.compile(r'\\begin\{([A-Za-z]+\*?)\}.*?\\end\{\1\}', re.DOTALL)
    # Mismatched or unusual environment names
    LOOSE_ENVIRONMENT_PATTERN = re.compile(r'\\begin\{[^}]*\}.*?\\end\{[^}]*\}', re.DOTALL)
    COMMAND_WITH_ARGS_PATTERN = re.compile(r'\\[a-zA-Z]+(?:\[[^\]\n]*\])?(?:\{[^{}]*\})?')
    BRACES_WITH_COMMAND_PATTERN = re.compile(r'\{[^{}]*\\[a-zA-Z]+[^{}]*\}')
    PLAIN_BRACES_PATTERN = re.compile(r'\{[^{}]*\}')
    BARE_COMMAND_PATTERN = re.compile(r'\\[a-zA-Z]+')
    STRAY_PATTERN = re.compile(r'[\\{}]')

    MAX_BRACE_PASSES = 5

    def __init__(self, heuristics: LineFilterHeuristics | None = None):
        self.heuristics = heuristics or LineFilterHeuristics.from_config()

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, displaystyle = self._replace_displaystyle(text)
        result, environments = self.ENVIRONMENT_PATTERN.subn(EQUATION_PLACEHOLDER, result)
        result, loose = self.LOOSE_ENVIRONMENT_PATTERN.subn(EQUATION_PLACEHOLDER, result)
        result, commands = self.COMMAND_WITH_ARGS_PATTERN.subn(' ', result)
        result, braces = self._collapse_braces(result)
        result, leftovers = self.BARE_COMMAND_PATTERN.subn('', result)
        result, stray = self.STRAY_PATTERN.subn('', result)
        result, dropped = self._filter_lines(result)

        return StageResult(
            text=result,
            changes_made=displaystyle + environments + loose + commands + braces + leftovers + stray + dropped,
            metadata={
                'displaystyle_blocks': displaystyle,
                'environments': environments + loose,
                'commands': commands + leftovers,
                'dropped_lines': dropped,
            },
        )

    def _replace_displaystyle(self, text: str) -> tuple[str, int]:
        parts: list[str] = []
        pos = 0
        count = 0
        while True:
            start = text.find(DISPLAYSTYLE_TOKEN, pos)
            if start == -1:
                break
            end = _find_closing_brace(text, start)
            if end is None:
                # Unbalanced: stop at the first closing brace, if any
                close = text.find('}', start)
                end = close if close != -1 else start + len(DISPLAYSTYLE_TOKEN) - 1
            parts.append(text[pos:start])
            parts.append(EQUATION_PLACEHOLDER)
            pos = end + 1
            count += 1
        parts.append(text[pos:])
        return ''.join(parts), count

    def _collapse_braces(self, text: str) -> tuple[str, int]:
        """Collapse brace groups from the innermost out, stopping once stable."""
        total = 0
        for _ in range(self.MAX_BRACE_PASSES):
            text, with_command = self.BRACES_WITH_COMMAND_PATTERN.subn(MATH_PLACEHOLDER, text)
            text, plain = self.PLAIN_BRACES_PATTERN.subn(' ', text)
            if not with_command and not plain:
                break
            total += with_command + plain
        return text, total

    def _filter_lines(self, text: str) -> tuple[str, int]:
        kept: list[str] = []
        dropped = 0
        for line in text.split('\n'):
            if not line.strip() or self._is_prose_line(line):
                kept.append(line)
            else:
                dropped += 1
        return '\n'.join(kept), dropped

    def _is_prose_line(self, line: str) -> bool:
        h = self.heuristics
        trimmed = line.strip()
        if len(trimmed) < h.min_line_length:
            return False
        if trimmed.count('[equation]') > h.max_equation_placeholders:
            return False

        rest = PLACEHOLDER_PATTERN.sub('', trimmed).strip()
        if not rest:
            return True
        if not WORD_PATTERN.search(rest):
            return False
        if len(rest) > h.ratio_min_length:
            letters = sum(1 for ch in rest if ch.isalpha())
            if letters / len(rest) < h.min_letter_ratio:
                return False
        return True
