"""
Prompt Sanitizer

Turns noisy extracted text (web page DOM text, PDF text, user selections)
into a bounded, model-safe string for embedding in an LLM prompt.

Usage:
    from prompt_sanitizer import clean

    prompt_text = clean(selection, max_length=2000)
"""

from dataclasses import replace
from typing import Any

from prompt_sanitizer.diagnostics import analyze_impact, debug_steps
from prompt_sanitizer.options import SanitizerOptions
from prompt_sanitizer.sanitization import (
    ContentSanitizer,
    SanitizationResult,
    ValidationResult,
    validate_cleaned_text,
)
from prompt_sanitizer.stages import SanitizationPipeline, create_default_pipeline
from prompt_sanitizer.utils import (
    build_excerpt,
    clean_to_prompt_ready,
    dedupe_repeating_lines,
    normalize_whitespace,
)

__version__ = "1.0.0"


def clean(text: Any, options: SanitizerOptions | None = None, **overrides) -> str:
    """
    Sanitize text for a prompt.

    Args:
        text: Input text (str, bytes or None)
        options: Base options; keyword overrides are applied on top,
            e.g. clean(text, max_length=2000, silent=True)

    Returns:
        Cleaned text, or a lightly normalized copy of the input when cleaning
        fails validation. Never None, at most max_length + 3 characters.
    """
    options = options or SanitizerOptions()
    if overrides:
        options = replace(options, **overrides)
    return ContentSanitizer(options).sanitize(text)


__all__ = [
    'ContentSanitizer',
    'SanitizationPipeline',
    'SanitizationResult',
    'SanitizerOptions',
    'ValidationResult',
    'analyze_impact',
    'build_excerpt',
    'clean',
    'clean_to_prompt_ready',
    'create_default_pipeline',
    'debug_steps',
    'dedupe_repeating_lines',
    'normalize_whitespace',
    'validate_cleaned_text',
]
