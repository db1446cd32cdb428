"""
Sanitizer Options

Immutable per-call settings. Invalid values are programming errors and raise
ValueError at construction instead of degrading to the fallback path.
"""

from dataclasses import dataclass

from prompt_sanitizer.config import DEFAULT_MAX_LENGTH, DEFAULT_MIN_WORDS


@dataclass(frozen=True)
class SanitizerOptions:
    """
    Attributes:
        max_length: Maximum output length before the ellipsis allowance
        min_words: Prose words the cleaned text needs to be accepted
        aggressive_unicode: Transliterate to ASCII and drop everything else
        preserve_equations: Keep Unicode math symbols as they are
        silent: Do not log fallback warnings
        repair_encoding: Repair mojibake before cleaning
    """
    max_length: int = DEFAULT_MAX_LENGTH
    min_words: int = DEFAULT_MIN_WORDS
    aggressive_unicode: bool = False
    preserve_equations: bool = False
    silent: bool = False
    repair_encoding: bool = True

    def __post_init__(self):
        if self.max_length < 1:
            raise ValueError(f"max_length must be at least 1, got {self.max_length}")
        if self.min_words < 0:
            raise ValueError(f"min_words must not be negative, got {self.min_words}")
