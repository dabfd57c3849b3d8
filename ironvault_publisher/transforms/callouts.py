"""Obsidian callout conversion.

Turns quote-block callouts::

    > [!warning]- Careful
    > Body text

into the nested ``div`` structure Obsidian themes style, leaving every
other line untouched. The body is kept as markdown and surrounded by blank
lines so the markdown engine still renders it inside the raw HTML block.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ironvault_publisher.transforms.fences import closes_fence, fence_opener
from ironvault_publisher.transforms.icons import DEFAULT_ICONS, IconTable
from ironvault_publisher.transforms.links import escape_html

# > [!type]  > [!type]- Title  > [!type]+ Title
CALLOUT_HEADER_PATTERN = re.compile(r'^>\s*\[!([^\]]+)\]([-+])?\s*(.*)$')

QUOTE_MARKER = '>'


@dataclass
class Callout:
    """A callout being accumulated by the state machine."""

    type: str
    title: str
    collapsible: bool = False
    body_lines: List[str] = field(default_factory=list)

    @classmethod
    def from_header(cls, match: re.Match) -> "Callout":
        callout_type = match.group(1).strip().lower()
        title = match.group(3).strip() or callout_type.upper()
        return cls(
            type=callout_type,
            title=title,
            collapsible=match.group(2) in ('-', '+'),
        )


class State(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"
    FENCE = "fence"


class CalloutConverter:
    """Line-by-line callout state machine.

    States are ``OUTSIDE``, ``INSIDE`` (with the open ``Callout`` as the
    accumulator) and ``FENCE``, which passes fenced code through untouched.
    A blank line inside a callout looks one line ahead: the callout
    continues only if the next line is still quoted.
    """

    def __init__(self, icons: IconTable = DEFAULT_ICONS):
        self.icons = icons

    def convert(self, content: str) -> str:
        """Convert every callout in ``content``; other lines pass through."""
        lines = content.replace('\r\n', '\n').replace('\r', '\n').split('\n')
        output: List[str] = []
        state = State.OUTSIDE
        current: Optional[Callout] = None
        fence: Optional[str] = None

        for i, line in enumerate(lines):
            if state is State.FENCE:
                output.append(line)
                if closes_fence(line, fence):
                    state = State.OUTSIDE
                    fence = None
                continue

            header = CALLOUT_HEADER_PATTERN.match(line)

            if header:
                if state is State.INSIDE:
                    output.append(self.render(current))
                current = Callout.from_header(header)
                state = State.INSIDE
                continue
            if state is State.INSIDE:
                if line.startswith(QUOTE_MARKER):
                    current.body_lines.append(self._dequote(line))
                    continue
                next_line = lines[i + 1] if i + 1 < len(lines) else None
                if line.strip() == '' and next_line is not None and next_line.startswith(QUOTE_MARKER):
                    current.body_lines.append('')
                    continue
                output.append(self.render(current))
                current = None
                state = State.OUTSIDE

            output.append(line)
            fence = fence_opener(line)
            if fence:
                state = State.FENCE

        if state is State.INSIDE:
            output.append(self.render(current))

        return '\n'.join(output)

    @staticmethod
    def _dequote(line: str) -> str:
        return re.sub(r'^>\s?', '', line, count=1)

    def render(self, callout: Callout) -> str:
        """Render one callout to its fixed HTML structure."""
        callout_type = escape_html(callout.type)
        title = escape_html(callout.title or callout.type.upper())
        icon = self.icons.callout_icon(callout.type)
        body = '\n'.join(callout.body_lines)

        if callout.collapsible:
            return (
                f'<div data-callout-metadata="" data-callout-fold="-" data-callout="{callout_type}" '
                f'class="callout is-collapsible is-collapsed">\n'
                f'<div class="callout-title" dir="auto">\n'
                f'<div class="callout-icon">{icon}</div>\n'
                f'<div class="callout-title-inner">{title}</div>\n'
                f'<div class="callout-fold is-collapsed">{self.icons.fold}</div>\n'
                f'</div>\n'
                f'<div class="callout-content" style="display: none;">\n\n'
                f'{body}\n\n'
                f'</div>\n'
                f'</div>'
            )

        return (
            f'<div data-callout-metadata="" data-callout="{callout_type}" class="callout">\n'
            f'<div class="callout-title" dir="auto">\n'
            f'<div class="callout-icon">{icon}</div>\n'
            f'<div class="callout-title-inner">{title}</div>\n'
            f'</div>\n'
            f'<div class="callout-content">\n\n'
            f'{body}\n\n'
            f'</div>\n'
            f'</div>'
        )


def convert_callouts(content: str, icons: IconTable = DEFAULT_ICONS) -> str:
    """Convert callouts in ``content`` using ``icons``."""
    return CalloutConverter(icons).convert(content)
