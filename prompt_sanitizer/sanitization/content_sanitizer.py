"""
Content Sanitizer

Entry point of the cleaning pipeline. Runs every stage, validates the result
and falls back to a lightly normalized copy of the input when cleaning fails
or produces too little prose.

States:
    Cleaning -> Validating -> Accepted
                           -> Fallback (validation failed)
    Cleaning -> Fallback (a stage raised)

sanitize() never raises for text input and never returns None.
"""

from dataclasses import dataclass, field
from typing import Any

from prompt_sanitizer.logging_config import Timer, debug_log, error, warning
from prompt_sanitizer.options import SanitizerOptions
from prompt_sanitizer.sanitization.validator import ValidationResult, validate_cleaned_text
from prompt_sanitizer.stages import create_default_pipeline
from prompt_sanitizer.utils.text_utils import light_normalize


@dataclass
class SanitizationResult:
    """
    Result of a sanitization run.

    Attributes:
        text: The text to put into the prompt
        used_fallback: True when text is the fallback rendition of the input
        validation: Validation of the pipeline output (None if it raised)
        stage_stats: Per-stage statistics from the pipeline
        error: "ExceptionType: message" when a stage raised
    """
    text: str
    used_fallback: bool = False
    validation: ValidationResult | None = None
    stage_stats: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


def coerce_text(text: Any) -> str:
    """Turn supported inputs into str; unsupported types become ''."""
    if text is None:
        return ''
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode('utf-8', errors='replace')
    warning(f"[SANITIZER] Unsupported input type {type(text).__name__}, treating as empty")
    return ''


class ContentSanitizer:
    """
    Cleans extracted page/PDF text for use inside an LLM prompt.

    Example:
        sanitizer = ContentSanitizer(SanitizerOptions(max_length=2000))
        prompt_text = sanitizer.sanitize(selection)

        report = sanitizer.sanitize_with_report(selection)
        if report.used_fallback:
            ...
    """

    def __init__(self, options: SanitizerOptions | None = None):
        self.options = options or SanitizerOptions()

    def sanitize(self, text: Any) -> str:
        """Return cleaned text, or the fallback rendition of the input."""
        return self.sanitize_with_report(text).text

    def sanitize_with_report(self, text: Any) -> SanitizationResult:
        """
        Clean text and report how the result was obtained.

        Args:
            text: str, bytes (decoded as UTF-8) or None

        Returns:
            SanitizationResult
        """
        original = coerce_text(text)
        if not original:
            return SanitizationResult(text='')

        pipeline = create_default_pipeline(self.options)
        try:
            with Timer("Sanitization"):
                cleaned = pipeline.process(original)
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            if not self.options.silent:
                error(f"[SANITIZER] Cleaning failed, using fallback: {message}", exc_info=True)
            return SanitizationResult(
                text=self._fallback(original),
                used_fallback=True,
                stage_stats=pipeline.get_stats(),
                error=message,
            )

        validation = validate_cleaned_text(cleaned, self.options.min_words)
        stats = pipeline.get_stats()

        if not validation.valid:
            if not self.options.silent:
                warning(f"[SANITIZER] Cleaned text failed validation "
                        f"({'; '.join(validation.warnings)}), using fallback")
            return SanitizationResult(
                text=self._fallback(original),
                used_fallback=True,
                validation=validation,
                stage_stats=stats,
            )

        if validation.warnings and not self.options.silent:
            warning(f"[SANITIZER] {'; '.join(validation.warnings)}")

        debug_log(f"[SANITIZER] {len(original)} -> {len(cleaned)} chars, "
                  f"{validation.word_count} words, {validation.placeholder_count} placeholders")
        return SanitizationResult(text=cleaned, validation=validation, stage_stats=stats)

    def _fallback(self, original: str) -> str:
        return light_normalize(original)[:self.options.max_length]
