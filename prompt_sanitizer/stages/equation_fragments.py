"""
Equation Fragment Cleaner Stage

Rendered math that was copied as text degrades into runs of single letters
and half-formulas ("F = m a", "G mu nu + Lambda g mu nu = kappa T mu nu").
This stage recognizes those shapes heuristically, in order:

1. Long runs of space-separated single letters -> [equation]
2. Assignments whose right side names a Greek letter near the '=' -> [equation]
3. Assignments to runs of bare single-letter variables -> [equation]
4. Subscripted assignments like "R_ij = f(...)" with a long argument list -> [equation]
5. Parentheticals full of single letters -> removed
6. Shorter runs of single letters -> removed
7. "where x is the ..." defining clauses -> removed
8. Any other "lhs = rhs" is scored; short, simple ones survive
9. Mop-up of operator characters and duplicate placeholders

All thresholds are fields of EquationHeuristics, read from the
'equation_fragments' section of the heuristics YAML.
"""

import re
from dataclasses import dataclass, fields

from prompt_sanitizer.config import get_heuristics_section
from prompt_sanitizer.stages.base import BaseStage, StageResult

EQUATION_PLACEHOLDER = " [equation] "

GREEK_NAMES = (
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'zeta', 'eta', 'theta',
    'iota', 'kappa', 'lambda', 'mu', 'nu', 'xi', 'omicron', 'pi', 'rho',
    'sigma', 'tau', 'upsilon', 'phi', 'chi', 'psi', 'omega',
)
GREEK_ALTERNATION = '|'.join(GREEK_NAMES)
GREEK_WORD_PATTERN = re.compile(rf'\b(?:{GREEK_ALTERNATION})\b', re.IGNORECASE)

# A letter in any script that stands alone
SINGLE_LETTER = r'[^\W\d_]'
# A bare variable: one ASCII letter with an optional subscript or index
BARE_VARIABLE = r'[A-Za-z](?:_\w+|\d+)?\b'
# Left side of an assignment may not continue a word (hyphenated ones too),
# a placeholder or an operator
LHS_BOUNDARY = r"(?<![\w^'/<>!=\[-])"

ASCII_SINGLE_LETTER_PATTERN = re.compile(r'(?<![A-Za-z])[A-Za-z](?![A-Za-z])')
SUBSCRIPT_MARK_PATTERN = re.compile('[_₀-ₜ]')
OPERATOR_CHARS_PATTERN = re.compile('[⋅·×∇∂]')
DUPLICATE_PLACEHOLDER_PATTERN = re.compile(r'\[(equation|math)\](?:[ \t.]*\[\1\])+')
WHITESPACE_RUN_PATTERN = re.compile(r'\s+')


@dataclass(frozen=True)
class EquationHeuristics:
    """
    Tunable thresholds of the equation-fragment cleaner.

    Attributes:
        letter_run_min: Single-letter runs at least this long become [equation]
        short_letter_run_min: Shortest single-letter run that is dropped
        short_letter_run_max: Longest single-letter run that is dropped
        paren_letter_run_min: Single letters inside parentheses that mark
            the parenthetical as debris
        greek_window: Max distance from '=' to a Greek letter name
        bare_var_min: Bare variables after 'var = var' that mark a formula
        subscript_paren_min: Minimum argument list length of 'name_ij = f(...)'
        multi_var_min: Spaced single letters that mark a multi-variable rhs
        generic_max_match: Longer 'lhs = rhs' matches are left alone
        keep_max_length: A kept 'lhs = rhs' must be shorter than this
        keep_max_single_letters: ... have at most this many single letters
        keep_max_spaces: ... and fewer spaces than this
    """
    letter_run_min: int = 7
    short_letter_run_min: int = 5
    short_letter_run_max: int = 6
    paren_letter_run_min: int = 6
    greek_window: int = 80
    bare_var_min: int = 3
    subscript_paren_min: int = 20
    multi_var_min: int = 3
    generic_max_match: int = 150
    keep_max_length: int = 30
    keep_max_single_letters: int = 5
    keep_max_spaces: int = 10

    @classmethod
    def from_config(cls, **overrides) -> 'EquationHeuristics':
        """Build from the YAML section, with keyword overrides on top."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in get_heuristics_section('equation_fragments').items() if k in known}
        values.update(overrides)
        return cls(**values)


def _letter_run(min_letters: int, max_letters: int | None = None) -> str:
    upper = '' if max_letters is None else str(max_letters - 1)
    return rf'(?<!\w){SINGLE_LETTER}(?:[ \t]+{SINGLE_LETTER}){{{min_letters - 1},{upper}}}(?!\w)'


class EquationFragmentCleaner(BaseStage):
    """
    Replaces or removes plain-text remnants of rendered equations.

    Example:
        "The field equations G mu nu + Lambda g mu nu = kappa T mu nu relate
        geometry to matter."
        -> "The field equations [equation] relate geometry to matter."
    """

    name = "Equation Fragment Cleaner"

    def __init__(self, heuristics: EquationHeuristics | None = None):
        self.heuristics = h = heuristics or EquationHeuristics.from_config()

        self.long_letter_run_pattern = re.compile(_letter_run(h.letter_run_min))
        self.greek_assignment_pattern = re.compile(
            rf'{LHS_BOUNDARY}[A-Za-z][\w^\']*[ \t]*=(?![=>])[ \t]*'
            rf'[^\n=]{{0,{h.greek_window}}}?\b(?:{GREEK_ALTERNATION})\b'
            rf'[^\n]*?(?=[,;]\s|\.(?:\s|$)|\n|$)',
            re.IGNORECASE,
        )
        self.bare_variable_pattern = re.compile(
            rf'{LHS_BOUNDARY}{BARE_VARIABLE}[ \t]*=(?![=>])[ \t]*-?[ \t]*{BARE_VARIABLE}'
            rf'(?:[ \t]+{BARE_VARIABLE}){{{h.bare_var_min},}}'
        )
        self.subscript_assignment_pattern = re.compile(
            rf'\b[A-Za-z]+_\w+[ \t]*=[ \t]*[A-Za-z]\w*\([^()\n]{{{h.subscript_paren_min},}}\)'
        )
        self.letter_parenthetical_pattern = re.compile(
            rf'\((?=[^()\n]*?{_letter_run(h.paren_letter_run_min)})[^()\n]*\)'
        )
        self.short_letter_run_pattern = re.compile(
            _letter_run(h.short_letter_run_min, h.short_letter_run_max)
        )
        self.where_clause_pattern = re.compile(
            rf'[ \t]*,?[ \t]*\bwhere[ \t]+(?:[A-Za-z](?:_\w+|\d+)?|{GREEK_ALTERNATION})'
            rf'[ \t]+is[ \t]+(?:the[ \t]+|an?[ \t]+)?[^.\n]*'
        )
        self.generic_assignment_pattern = re.compile(
            rf"{LHS_BOUNDARY}[A-Za-z][\w^'/]*(?:\([^()\n]{{0,30}}\))?"
            rf'[ \t]*(?<![<>!=])=(?![=>])[^\n]*?(?=[,;]\s|\.(?:\s|$)|\n|$)'
        )
        self.multi_var_pattern = re.compile(
            rf'(?<![A-Za-z])[A-Za-z](?:[ \t]+[A-Za-z]){{{h.multi_var_min - 1},}}(?![A-Za-z])'
        )

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        counts: dict[str, int] = {}
        result = text

        result, counts['letter_runs'] = self.long_letter_run_pattern.subn(EQUATION_PLACEHOLDER, result)
        result, counts['greek_assignments'] = self.greek_assignment_pattern.subn(EQUATION_PLACEHOLDER, result)
        result, counts['bare_variables'] = self.bare_variable_pattern.subn(EQUATION_PLACEHOLDER, result)
        result, counts['subscript_assignments'] = self.subscript_assignment_pattern.subn(
            EQUATION_PLACEHOLDER, result)
        result, counts['letter_parentheticals'] = self.letter_parenthetical_pattern.subn(' ', result)
        result, counts['short_letter_runs'] = self.short_letter_run_pattern.subn(' ', result)
        result, counts['where_clauses'] = self.where_clause_pattern.subn('', result)
        result, counts['generic_assignments'] = self.generic_assignment_pattern.subn(
            self._classify_assignment, result)
        result, counts['operators'] = OPERATOR_CHARS_PATTERN.subn(' ', result)
        result = result.replace('−', '-')
        result, counts['duplicate_placeholders'] = DUPLICATE_PLACEHOLDER_PATTERN.subn(r'[\1]', result)

        return StageResult(text=result, changes_made=sum(counts.values()), metadata=counts)

    def _classify_assignment(self, match: re.Match) -> str:
        fragment = match.group(0)
        h = self.heuristics
        if len(fragment) > h.generic_max_match:
            return fragment

        if self.looks_like_equation(fragment):
            return EQUATION_PLACEHOLDER
        return WHITESPACE_RUN_PATTERN.sub(' ', fragment)

    def looks_like_equation(self, fragment: str) -> bool:
        """
        Score an 'lhs = rhs' fragment.

        Returns:
            False only for short, simple assignments such as "x = 5"
        """
        h = self.heuristics
        single_letters = len(ASCII_SINGLE_LETTER_PATTERN.findall(fragment))
        spaces = fragment.count(' ')

        if GREEK_WORD_PATTERN.search(fragment):
            return True
        if SUBSCRIPT_MARK_PATTERN.search(fragment):
            return True
        if self.multi_var_pattern.search(fragment):
            return True
        return not (
            len(fragment) < h.keep_max_length
            and single_letters <= h.keep_max_single_letters
            and spaces < h.keep_max_spaces
        )
