"""
Text Utility Functions

Whitespace and line-level helpers shared by the final compose stage, the
fallback path and the extraction layers that only need light cleanup.
"""

import re

from prompt_sanitizer.config import EXCERPT_MAX_LENGTH, EXCERPT_MIN_CUT_RATIO

# Zero-width, soft hyphen and bidi controls (U+200B-U+200F, U+2060,
# U+FEFF, U+00AD, U+202A-U+202E, U+2066-U+2069)
INVISIBLE_CHARS_PATTERN = re.compile(
    '[\u200b-\u200f\u2060\ufeff\u00ad\u202a-\u202e\u2066-\u2069]'
)

# C0 controls except newline and tab, plus DEL
CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')

# Lone surrogates cannot be encoded as UTF-8 and break JSON payloads
SURROGATE_PATTERN = re.compile('[\ud800-\udfff]')

LINE_ENDING_PATTERN = re.compile(r'\r\n?')

# Markup tag: '<' directly followed by a name, '/', '!' or '?'
TAG_PATTERN = re.compile(r'<[A-Za-z/!?][^<>]*>')

_TRAILING_SPACE_PATTERN = re.compile(r'[ \t]+\n')
_BLANK_RUN_PATTERN = re.compile(r'\n{3,}')
_SPACE_RUN_PATTERN = re.compile(r'[ \t]+')


def normalize_whitespace(text: str | None) -> str:
    """
    Normalize whitespace while preserving paragraph breaks.

    - Non-breaking spaces become regular spaces
    - Trailing spaces/tabs before a newline are trimmed
    - 3+ newlines collapse to one blank line
    - Runs of spaces/tabs collapse to a single space
    - Leading/trailing whitespace is trimmed

    Args:
        text: Input text (None is treated as empty)

    Returns:
        Normalized text
    """
    if not text:
        return ''
    text = text.replace('\u00a0', ' ')
    text = _TRAILING_SPACE_PATTERN.sub('\n', text)
    text = _BLANK_RUN_PATTERN.sub('\n\n', text)
    text = _SPACE_RUN_PATTERN.sub(' ', text)
    return text.strip()


def dedupe_repeating_lines(text: str | None) -> str:
    """
    Remove duplicate lines while keeping paragraph structure.

    Non-blank lines are compared trimmed and case-insensitively; only the
    first occurrence survives. Blank lines are kept, but never more than two
    in a row.

    Args:
        text: Input text

    Returns:
        De-duplicated text
    """
    lines = normalize_whitespace(text).split('\n')
    seen: set[str] = set()
    out: list[str] = []

    for line in lines:
        trimmed = line.strip()

        if not trimmed:
            if all(not previous.strip() for previous in out[-2:]):
                continue
            out.append(line)
            continue

        key = trimmed.lower()
        if key not in seen:
            seen.add(key)
            out.append(line)

    return '\n'.join(out)


def clean_to_prompt_ready(text: str | None) -> str:
    """
    Light cleanup: whitespace normalization plus line de-duplication.

    This is the final compose transform of the sanitizer, also usable on its
    own by callers that only need readable prompt text.
    """
    if not text:
        return ''
    return normalize_whitespace(dedupe_repeating_lines(text))


def light_normalize(text: str | None) -> str:
    """
    Minimal normalization used by the sanitizer's fallback path.

    Strips invisible characters, control bytes and tag markup, then
    normalizes whitespace. For text free of those, this is exactly
    normalize_whitespace(text).
    """
    if not text:
        return ''
    text = INVISIBLE_CHARS_PATTERN.sub('', text)
    text = LINE_ENDING_PATTERN.sub('\n', text)
    text = CONTROL_CHARS_PATTERN.sub('', text)
    text = SURROGATE_PATTERN.sub('', text)
    text = TAG_PATTERN.sub(' ', text)
    return normalize_whitespace(text)


def build_excerpt(text: str | None, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """
    Create a short excerpt with word-boundary truncation.

    Args:
        text: Input text
        max_length: Maximum excerpt length before the trailing ellipsis

    Returns:
        Normalized text, cut at the last space past half of max_length
        (or hard-cut) with '…' appended when truncation happened

    Example:
        >>> build_excerpt("one two three four", max_length=10)
        'one two…'
    """
    if not text:
        return ''
    clean = normalize_whitespace(text)
    if len(clean) <= max_length:
        return clean

    cut = clean[:max_length]
    last_space = cut.rfind(' ')
    cut_point = last_space if last_space > max_length * EXCERPT_MIN_CUT_RATIO else max_length
    return f"{cut[:cut_point].strip()}…"
