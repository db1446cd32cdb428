"""
Diagnostics

Read-only helpers for inspecting what the sanitizer did. Neither function
changes pipeline behavior, and neither raises for text input.
"""

import re
from typing import Any

from prompt_sanitizer.options import SanitizerOptions
from prompt_sanitizer.sanitization.content_sanitizer import coerce_text
from prompt_sanitizer.stages import create_default_pipeline

WORD_PATTERN = re.compile(r'\b\w+\b')


def _text_stats(text: str) -> dict[str, int]:
    return {
        'length': len(text),
        'lines': len(text.split('\n')),
        'words': len(WORD_PATTERN.findall(text)),
    }


def analyze_impact(original: str | None, cleaned: str | None) -> dict[str, dict[str, Any]]:
    """
    Summarize how much cleaning removed.

    Args:
        original: Text before cleaning
        cleaned: Text after cleaning

    Returns:
        {'original': {length, lines, words}, 'cleaned': {...},
         'removed': {length, percentage}, 'placeholders': {equations, math, code, links}}
        percentage is rounded to one decimal and 0.0 for an empty original.
    """
    original = original or ''
    cleaned = cleaned or ''
    removed_pct = round((1 - len(cleaned) / len(original)) * 100, 1) if original else 0.0

    return {
        'original': _text_stats(original),
        'cleaned': _text_stats(cleaned),
        'removed': {
            'length': len(original) - len(cleaned),
            'percentage': removed_pct,
        },
        'placeholders': {
            'equations': cleaned.count('[equation]'),
            'math': cleaned.count('[math]'),
            'code': cleaned.count('[code'),
            'links': cleaned.count('[link]'),
        },
    }


def debug_steps(text: Any, options: SanitizerOptions | None = None) -> dict[str, str]:
    """
    Run the pipeline and return the text after every stage.

    Stages run in non-strict mode: a stage that raises keeps its input and
    the remaining stages still run.

    Returns:
        Ordered mapping from "original" and each enabled stage name to text
    """
    pipeline = create_default_pipeline(options, strict=False)
    return pipeline.trace(coerce_text(text))
