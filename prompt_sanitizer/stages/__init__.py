"""
Sanitization Stages Module

Each stage is a standalone class that removes or rewrites one kind of noise.
Stages can be enabled/disabled independently and run in a fixed order.

Pipeline Architecture:
- BaseStage: Abstract base class defining the stage interface
- SanitizationPipeline: Runs stages in sequence, with optional snapshots
- Individual stages: HtmlDecoder, LatexCleaner, EquationFragmentCleaner, etc.

Usage:
    from prompt_sanitizer.stages import create_default_pipeline

    pipeline = create_default_pipeline(SanitizerOptions(max_length=2000))
    cleaned_text = pipeline.process(raw_text)

    # Or pick stages by hand:
    pipeline = SanitizationPipeline([
        HtmlDecoder(),
        UrlStripper(),
    ])
    cleaned_text = pipeline.process(raw_text)
"""

from prompt_sanitizer.options import SanitizerOptions
from prompt_sanitizer.stages.ascii_folder import AsciiFolder
from prompt_sanitizer.stages.base import BaseStage, SanitizationPipeline, StageResult
from prompt_sanitizer.stages.citation_stripper import CitationStripper
from prompt_sanitizer.stages.code_stripper import CodeStripper
from prompt_sanitizer.stages.compose import FinalComposer
from prompt_sanitizer.stages.emoji_stripper import EmojiStripper
from prompt_sanitizer.stages.encoding import EncodingRepairer
from prompt_sanitizer.stages.equation_fragments import EquationFragmentCleaner, EquationHeuristics
from prompt_sanitizer.stages.html_decoder import HtmlDecoder
from prompt_sanitizer.stages.invisible import InvisibleCharStripper
from prompt_sanitizer.stages.json_safety import JsonSafetyEscaper
from prompt_sanitizer.stages.latex_cleaner import LatexCleaner, LineFilterHeuristics
from prompt_sanitizer.stages.length_capper import LengthCapper
from prompt_sanitizer.stages.math_delimiters import MathDelimiterStripper
from prompt_sanitizer.stages.table_stripper import TableStripper
from prompt_sanitizer.stages.unicode_math import UnicodeMathNormalizer
from prompt_sanitizer.stages.url_stripper import UrlStripper


def create_default_pipeline(options: SanitizerOptions | None = None,
                            strict: bool = True) -> SanitizationPipeline:
    """
    Create a pipeline with every standard stage.

    Order matters:
    1. EncodingRepairer - Fixes mojibake (disabled by repair_encoding=False)
    2. InvisibleCharStripper / JsonSafetyEscaper - Byte-level hygiene first
    3. HtmlDecoder - Markup before anything pattern-matches on words
    4. UrlStripper, CodeStripper, TableStripper, CitationStripper - Page noise
    5. MathDelimiterStripper, LatexCleaner - TeX source
    6. UnicodeMathNormalizer - Rendered math (disabled by preserve_equations)
    7. EquationFragmentCleaner - Relies on the Greek names produced by 6
    8. EmojiStripper, AsciiFolder (aggressive_unicode only)
    9. FinalComposer - Whitespace and duplicate lines
    10. LengthCapper - Always last so the length bound holds

    Args:
        options: Sanitizer options (defaults when None)
        strict: Re-raise stage errors (see SanitizationPipeline)

    Returns:
        Configured SanitizationPipeline instance
    """
    options = options or SanitizerOptions()

    encoding_repairer = EncodingRepairer()
    encoding_repairer.enabled = options.repair_encoding
    unicode_math = UnicodeMathNormalizer()
    unicode_math.enabled = not options.preserve_equations
    ascii_folder = AsciiFolder()
    ascii_folder.enabled = options.aggressive_unicode

    return SanitizationPipeline(stages=[
        encoding_repairer,
        InvisibleCharStripper(),
        JsonSafetyEscaper(),
        HtmlDecoder(),
        UrlStripper(),
        CodeStripper(),
        TableStripper(),
        CitationStripper(),
        MathDelimiterStripper(),
        LatexCleaner(),
        unicode_math,
        EquationFragmentCleaner(),
        EmojiStripper(),
        ascii_folder,
        FinalComposer(),
        LengthCapper(options.max_length),
    ], strict=strict)


__all__ = [
    'AsciiFolder',
    'BaseStage',
    'CitationStripper',
    'CodeStripper',
    'EmojiStripper',
    'EncodingRepairer',
    'EquationFragmentCleaner',
    'EquationHeuristics',
    'FinalComposer',
    'HtmlDecoder',
    'InvisibleCharStripper',
    'JsonSafetyEscaper',
    'LatexCleaner',
    'LengthCapper',
    'LineFilterHeuristics',
    'MathDelimiterStripper',
    'SanitizationPipeline',
    'StageResult',
    'TableStripper',
    'UnicodeMathNormalizer',
    'UrlStripper',
    'create_default_pipeline',
]
