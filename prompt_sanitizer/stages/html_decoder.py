"""
HTML Decoder Stage

Removes markup from DOM-extracted text and decodes the entities that commonly
survive extraction.

Order of operations:
1. Strip tag markup, replacing each tag with a space so words on either side
   stay separate
2. Decode entities in a single pass ("&amp;lt;" becomes "&lt;", not "<")
3. Strip any markup the decoding produced ("&lt;b&gt;" becomes "<b>")

Numeric entities decode only to printable ASCII; anything else becomes a
space. Named entities outside the table are left as they are.
"""

import re

from prompt_sanitizer.stages.base import BaseStage, StageResult
from prompt_sanitizer.utils.text_utils import TAG_PATTERN

ENTITY_PATTERN = re.compile(r'&(#\d+|#[xX][0-9A-Fa-f]+|[a-zA-Z]+);')

NAMED_ENTITIES = {
    'lt': '<',
    'gt': '>',
    'amp': '&',
    'quot': '"',
    'apos': "'",
    'nbsp': ' ',
    'mdash': '--',
    'ndash': '-',
    'hellip': '...',
    'rsquo': "'",
    'lsquo': "'",
    'rdquo': '"',
    'ldquo': '"',
    'middot': '*',
    'bull': '*',
    'deg': ' degrees',
}


def _decode_entity(match: re.Match) -> str:
    body = match.group(1)
    if body.startswith('#'):
        if body[1] in 'xX':
            code_point = int(body[2:], 16)
        else:
            code_point = int(body[1:])
        if 32 <= code_point <= 126:
            return chr(code_point)
        return ' '
    return NAMED_ENTITIES.get(body, match.group(0))


class HtmlDecoder(BaseStage):
    """
    Strips tags and decodes a fixed table of HTML entities.

    Example:
        "<p>Fish &amp; chips&nbsp;&mdash; cheap</p>"
        -> " Fish & chips -- cheap "
    """

    name = "HTML Decoder"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, tags = TAG_PATTERN.subn(' ', text)
        result, entities = ENTITY_PATTERN.subn(_decode_entity, result)
        result, decoded_tags = TAG_PATTERN.subn(' ', result)

        return StageResult(
            text=result,
            changes_made=tags + entities + decoded_tags,
            metadata={
                'tags': tags + decoded_tags,
                'entities': entities,
            },
        )
