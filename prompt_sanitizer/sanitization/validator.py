"""
Cleaned Text Validator

Decides whether the pipeline output is still meaningful prose. Text that
fails validation is replaced by the fallback path in ContentSanitizer.
"""

import re
from dataclasses import dataclass, field

from prompt_sanitizer.config import (
    DEFAULT_MIN_WORDS,
    MIN_CLEANED_CHARS,
    PLACEHOLDER_WARNING_RATIO,
)

PLACEHOLDER_PATTERN = re.compile(r'\[(?:equation|math|code block|code|link|email)\]', re.IGNORECASE)
PROSE_WORD_PATTERN = re.compile(r'\b[a-zA-Z]{2,}\b')


@dataclass
class ValidationResult:
    """
    Outcome of validate_cleaned_text.

    Attributes:
        valid: Enough words and characters to be used as-is
        word_count: Prose words, placeholder tokens excluded
        placeholder_count: Placeholder tokens found
        warnings: Reasons for rejection, or non-fatal notes when valid
    """
    valid: bool
    word_count: int
    placeholder_count: int
    warnings: list[str] = field(default_factory=list)


def validate_cleaned_text(text: str | None, min_words: int = DEFAULT_MIN_WORDS) -> ValidationResult:
    """
    Check that cleaned text has sufficient meaningful content.

    Args:
        text: Output of the cleaning pipeline
        min_words: Minimum number of prose words (2+ ASCII letters)

    Returns:
        ValidationResult; valid requires min_words words and at least
        MIN_CLEANED_CHARS characters after trimming
    """
    text = text or ''
    placeholder_count = len(PLACEHOLDER_PATTERN.findall(text))
    word_count = len(PROSE_WORD_PATTERN.findall(PLACEHOLDER_PATTERN.sub(' ', text)))
    char_count = len(text.strip())

    warnings = []
    if word_count < min_words:
        warnings.append(f"Insufficient words: {word_count} < {min_words}")
    if char_count < MIN_CLEANED_CHARS:
        warnings.append(f"Cleaned text too short: {char_count} < {MIN_CLEANED_CHARS} chars")

    valid = not warnings
    if valid and word_count and placeholder_count / word_count > PLACEHOLDER_WARNING_RATIO:
        warnings.append(f"High placeholder ratio: {placeholder_count}/{word_count}")

    return ValidationResult(
        valid=valid,
        word_count=word_count,
        placeholder_count=placeholder_count,
        warnings=warnings,
    )
