"""Code fence and code span boundaries for the text passes.

Callouts, embeds and wikilinks are rewritten as text before the markdown
engine runs. Fenced blocks and inline code spans must reach the engine
untouched, so those passes only see the prose between them.
"""

import re
from typing import Callable, List, Optional, Tuple

# ```lang  ~~~  (backtick fences may not carry backticks in the info string)
FENCE_OPEN_PATTERN = re.compile(r'^\s*(`{3,}(?=[^`]*$)|~{3,})')
FENCE_CLOSE_PATTERN = re.compile(r'^\s*(`{3,}|~{3,})\s*$')

# `code`  ``code with ` inside``
CODE_SPAN_PATTERN = re.compile(r'(`+)(?!`).*?(?<!`)\1(?!`)')

PLACEHOLDER_PATTERN = re.compile(r'\x00CODE(\d+)\x00')


def fence_opener(line: str) -> Optional[str]:
    """The fence marker a line opens with, or None."""
    match = FENCE_OPEN_PATTERN.match(line)
    return match.group(1) if match else None


def closes_fence(line: str, opener: str) -> bool:
    """A closing fence uses the opener's character, at least as many times."""
    match = FENCE_CLOSE_PATTERN.match(line)
    if not match:
        return False
    marker = match.group(1)
    return marker[0] == opener[0] and len(marker) >= len(opener)


def split_fences(text: str) -> List[Tuple[bool, str]]:
    """Split text into ``(is_fenced, segment)`` runs of whole lines.

    Joining the segments with newlines gives back the input. An unclosed
    fence runs to the end of the text.
    """
    segments: List[Tuple[bool, str]] = []
    lines: List[str] = []
    opener: Optional[str] = None

    for line in text.split('\n'):
        if opener is None:
            marker = fence_opener(line)
            if marker:
                if lines:
                    segments.append((False, '\n'.join(lines)))
                lines = [line]
                opener = marker
            else:
                lines.append(line)
        else:
            lines.append(line)
            if closes_fence(line, opener):
                segments.append((True, '\n'.join(lines)))
                lines = []
                opener = None

    if lines or not segments:
        segments.append((opener is not None, '\n'.join(lines)))
    return segments


def mask_code_spans(text: str) -> Tuple[str, List[str]]:
    """Replace inline code spans with placeholders."""
    spans: List[str] = []

    def stash(match: re.Match) -> str:
        spans.append(match.group(0))
        return f'\x00CODE{len(spans) - 1}\x00'

    return CODE_SPAN_PATTERN.sub(stash, text), spans


def restore_code_spans(text: str, spans: List[str]) -> str:
    return PLACEHOLDER_PATTERN.sub(lambda m: spans[int(m.group(1))], text)


def map_prose(text: str, transform: Callable[[str], str]) -> str:
    """Apply ``transform`` to the text outside fences and code spans."""
    parts = []
    for fenced, segment in split_fences(text):
        if fenced:
            parts.append(segment)
            continue
        masked, spans = mask_code_spans(segment)
        parts.append(restore_code_spans(transform(masked), spans))
    return '\n'.join(parts)
