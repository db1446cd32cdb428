"""
Content sanitization: the validated, fallback-protected entry point around
the stage pipeline.
"""

from .content_sanitizer import ContentSanitizer, SanitizationResult, coerce_text
from .validator import ValidationResult, validate_cleaned_text

__all__ = [
    "ContentSanitizer",
    "SanitizationResult",
    "ValidationResult",
    "coerce_text",
    "validate_cleaned_text",
]
