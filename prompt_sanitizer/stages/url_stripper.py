"""
URL/Email Stripper Stage

Links and addresses carry no meaning for the model and waste prompt budget.
They are replaced with a single space; no placeholder is left behind.
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult


class UrlStripper(BaseStage):
    """Replaces http(s) URLs, bare www. hosts and email addresses with a space."""

    name = "URL Stripper"

    URL_PATTERN = re.compile(r'https?://\S+')
    WWW_PATTERN = re.compile(r'\bwww\.\S+')
    EMAIL_PATTERN = re.compile(r'[\w.+-]+@[\w-]+(?:\.[\w-]+)+')

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, urls = self.URL_PATTERN.subn(' ', text)
        result, hosts = self.WWW_PATTERN.subn(' ', result)
        result, emails = self.EMAIL_PATTERN.subn(' ', result)

        return StageResult(
            text=result,
            changes_made=urls + hosts + emails,
            metadata={'urls': urls + hosts, 'emails': emails},
        )
