"""
Utility helpers shared across the sanitizer.

    from prompt_sanitizer.utils import normalize_whitespace, build_excerpt
"""

from prompt_sanitizer.utils.text_utils import (
    build_excerpt,
    clean_to_prompt_ready,
    dedupe_repeating_lines,
    light_normalize,
    normalize_whitespace,
)

__all__ = [
    'build_excerpt',
    'clean_to_prompt_ready',
    'dedupe_repeating_lines',
    'light_normalize',
    'normalize_whitespace',
]
