"""
Citation Stripper Stage

Removes encyclopedia boilerplate that DOM extraction drags along with the
article body:
- Navigation chrome ("Jump to navigation", "From Wikipedia, the free
  encyclopedia")
- Editorial markers ("[edit]", "[citation needed]", "[who?]", ...)
- Numeric citation markers ("[12]", "[1,2,3]", "[1-3]")
- Reference backlink lines starting with '^'
- "Main article:", "See also:" and "Further information:" pointers, up to
  the end of their sentence
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult


class CitationStripper(BaseStage):
    """Strips Wikipedia-style navigation text, citation markers and cross-references."""

    name = "Citation Stripper"

    BOILERPLATE_PATTERN = re.compile(
        r'Jump to (?:navigation|search|content)'
        r'|From Wikipedia, the free encyclopedia'
        r'|\[(?:edit|citation needed|clarification needed|when\?|who\?)\]',
        re.IGNORECASE,
    )
    # [12], [1,2,3], [1-3], [4–6]
    CITATION_MARKER_PATTERN = re.compile(r'\[\s*\d+(?:\s*[,–-]\s*\d+)*\s*\]')
    BACKLINK_LINE_PATTERN = re.compile(r'^[ \t]*\^.*$', re.MULTILINE)
    CROSS_REFERENCE_PATTERN = re.compile(
        r'\b(?:Main articles?|See also|Further information)\s*:[^.!?\n]*[.!?]?',
        re.IGNORECASE,
    )

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, boilerplate = self.BOILERPLATE_PATTERN.subn(' ', text)
        result, markers = self.CITATION_MARKER_PATTERN.subn('', result)
        result, backlinks = self.BACKLINK_LINE_PATTERN.subn('', result)
        result, references = self.CROSS_REFERENCE_PATTERN.subn(' ', result)

        return StageResult(
            text=result,
            changes_made=boilerplate + markers + backlinks + references,
            metadata={
                'boilerplate': boilerplate,
                'citation_markers': markers,
                'backlink_lines': backlinks,
                'cross_references': references,
            },
        )
