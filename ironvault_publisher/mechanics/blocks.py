"""Block Iron Vault mechanics: ``iron-vault-mechanics`` fenced blocks.

A block is a list of node lines shaped ``keyword "arg" key=value {``.
Nodes with a brace-enclosed body span several physical lines::

    move "[Face Danger](datasworn:move:starforged/adventure/face_danger)" {
        roll "Wits" action=4 adds=0 stat=2 vs1=3 vs2=8
    }
    oracle name="[Action](datasworn:oracle_rollable:starforged/core/action)" result="Bolster" roll=12
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from loguru import logger

from ironvault_publisher.core.models import LinkIndex
from ironvault_publisher.mechanics.directives import RollResult
from ironvault_publisher.transforms.links import escape_html, file_stem, html_anchor, strip_markdown_link

LANGUAGE = 'iron-vault-mechanics'

TOKEN_PATTERN = re.compile(
    r'\s*(?:'
    r'"(?P<quoted>(?:[^"\\]|\\.)*)"'
    r'|(?P<key>[\w.-]+)=(?:"(?P<qvalue>(?:[^"\\]|\\.)*)"|(?P<value>[^\s{}]+))'
    r'|(?P<brace>[{}])'
    r'|(?P<bare>[^\s{}"]+)'
    r')'
)

# [[Progress/Vow to Kira.md|Vow to Kira]]
TRACK_LINK_PATTERN = re.compile(r'^\[\[([^\]|]+)(?:\|([^\]]+))?\]\]$')


class BlockParseError(ValueError):
    """A recognized node whose arguments could not be parsed."""


def unescape(text: str) -> str:
    """Undo the plugin's escaping of quotes, backslashes and slashes."""
    return re.sub(r'\\(["\\/])', r'\1', text)


@dataclass
class Node:
    """One parsed node line plus its brace-enclosed children."""
    keyword: str
    args: List[str] = field(default_factory=list)
    props: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    source: str = ''

    def prop_int(self, key: str, required: bool = True, default: int = 0) -> int:
        value = self.props.get(key)
        if value is None or not re.match(r'^[+-]?\d+$', value.strip()):
            if required:
                raise BlockParseError(f"{self.keyword}: missing or non-numeric {key}")
            return default
        return int(value)

    def child(self, *keywords: str) -> Optional["Node"]:
        for node in self.children:
            if node.keyword in keywords:
                return node
        return None


class ScanState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


def brace_delta(line: str) -> int:
    """Open minus close braces, ignoring braces inside quoted strings."""
    delta = 0
    in_quote = False
    escaped = False
    for ch in line:
        if escaped:
            escaped = False
        elif ch == '\\':
            escaped = True
        elif ch == '"':
            in_quote = not in_quote
        elif not in_quote and ch == '{':
            delta += 1
        elif not in_quote and ch == '}':
            delta -= 1
    return delta


def scan_units(source: str) -> Iterator[List[str]]:
    """Group physical lines into logical node units by brace balance.

    A line that leaves braces open starts collecting; following lines join it
    until the running count returns to zero. An unbalanced unit runs to the
    end of the source and is still yielded.
    """
    state = ScanState.IDLE
    buffer: List[str] = []
    depth = 0

    for raw in source.split('\n'):
        line = raw.strip()
        if state is ScanState.IDLE:
            if not line:
                continue
            depth = brace_delta(line)
            if depth > 0:
                buffer = [line]
                state = ScanState.COLLECTING
            else:
                yield [line]
        else:
            buffer.append(line)
            depth += brace_delta(line)
            if depth <= 0:
                yield buffer
                buffer = []
                state = ScanState.IDLE

    if state is ScanState.COLLECTING:
        yield buffer


def split_body(text: str) -> Tuple[str, str]:
    """Split a unit at its first unquoted ``{`` into header and inner body.

    The inner body stops before the matching ``}``, or runs to the end of the
    text when the braces never balance.
    """
    in_quote = False
    escaped = False
    depth = 0
    start = None
    for i, ch in enumerate(text):
        if escaped:
            escaped = False
        elif ch == '\\':
            escaped = True
        elif ch == '"':
            in_quote = not in_quote
        elif in_quote:
            continue
        elif ch == '{':
            if start is None:
                start = i
            depth += 1
        elif ch == '}' and start is not None:
            depth -= 1
            if depth == 0:
                return text[:start], text[start + 1:i]
    if start is None:
        return text, ''
    return text[:start], text[start + 1:]


def parse_header(header: str) -> Node:
    """Tokenize a node header into keyword, positional args and props."""
    node = Node(keyword='', source=header.strip())
    for match in TOKEN_PATTERN.finditer(header):
        if match.group('quoted') is not None:
            node.args.append(unescape(match.group('quoted')))
        elif match.group('key') is not None:
            value = match.group('qvalue')
            if value is None:
                value = match.group('value')
            node.props[match.group('key')] = unescape(value)
        elif match.group('bare') is not None:
            if not node.keyword:
                node.keyword = match.group('bare')
            else:
                node.args.append(match.group('bare'))
    return node


def parse_unit(lines: List[str]) -> Node:
    """Build a node (and its children) from one scanned unit."""
    text = '\n'.join(lines)
    header, inner = split_body(text)
    node = parse_header(header)
    node.source = text
    node.children = [parse_unit(unit) for unit in scan_units(inner)]
    return node


def parse_block(source: str) -> List[Node]:
    """Parse a whole mechanics block into top-level nodes."""
    return [parse_unit(unit) for unit in scan_units(source.strip())]


def display_name(text: str) -> str:
    """Name shown for a ``[Name](datasworn:...)`` style reference."""
    return strip_markdown_link(text).strip()


class BlockMechanicRenderer:
    """Renders ``iron-vault-mechanics`` blocks to HTML."""

    def __init__(self, base_url: str = "", link_index: Optional[LinkIndex] = None):
        self.link_index = link_index or LinkIndex({})
        self.track_link = html_anchor(base_url)
        self._renderers: Dict[str, Callable[[Node], str]] = {
            'move': self._move,
            'oracle': self._oracle,
            'oracle-group': self._oracle_group,
            'track': self._track,
            'meter': self._meter,
        }

    def render(self, source: str) -> str:
        """Render a block body; unknown nodes are skipped."""
        parts = [self.render_node(node) for node in parse_block(source)]
        return f'<div class="iron-vault-mechanics">{"".join(parts)}</div>'

    def render_node(self, node: Node) -> str:
        renderer = self._renderers.get(node.keyword)
        if renderer is None:
            return ''
        try:
            return renderer(node)
        except BlockParseError as e:
            logger.debug(f"Unparseable mechanics node: {e}")
            return (
                f'<div class="iv-parse-error">Could not parse {escape_html(node.keyword)}: '
                f'{escape_html(node.source)}</div>'
            )

    def _move(self, node: Node) -> str:
        name = node.args[0] if node.args else node.props.get('name', '')
        if not name:
            raise BlockParseError("move: missing name")

        roll_node = node.child('roll', 'progress-roll')
        if roll_node is None:
            raise BlockParseError("move: missing roll")

        if roll_node.keyword == 'roll':
            stat_name = roll_node.args[0] if roll_node.args else ''
            action = roll_node.prop_int('action')
            adds = roll_node.prop_int('adds', required=False)
            stat = roll_node.prop_int('stat')
            roll = RollResult(action + stat + adds, roll_node.prop_int('vs1'), roll_node.prop_int('vs2'))
            dice = (
                f'<dd class="action-die">{action}</dd>\n'
                f'      <dd class="stat">{stat}</dd>\n'
                f'      <dd class="stat-name">{escape_html(stat_name)}</dd>\n'
                f'      <dd class="adds">{adds}</dd>\n'
            )
        else:
            roll = RollResult(roll_node.prop_int('score'), roll_node.prop_int('vs1'), roll_node.prop_int('vs2'))
            track = roll_node.props.get('name', '')
            dice = (
                f'<dd class="progress-track">{escape_html(self._track_label(track))}</dd>\n'
                if track else ''
            )

        css = ' '.join(roll.css_classes)
        extras = ''.join(
            self.render_node(child) for child in node.children if child is not roll_node
        )
        return (
            f'<details class="move {css}" open>\n'
            f'    <summary><span class="move-name">{escape_html(display_name(name))}</span></summary>\n'
            f'    <dl class="roll {css}">\n'
            f'      <dt>Roll</dt>\n'
            f'      {dice}'
            f'      <dd class="score">{roll.score}</dd>\n'
            f'      <dd class="challenge-die vs1">{roll.vs1}</dd>\n'
            f'      <dd class="challenge-die vs2">{roll.vs2}</dd>\n'
            f'    </dl>{extras}\n'
            f'  </details>'
        )

    def _oracle(self, node: Node) -> str:
        name = node.props.get('name') or (node.args[0] if node.args else '')
        if not name:
            raise BlockParseError("oracle: missing name")
        return (
            f'<dl class="oracle">\n'
            f'    <dt>Oracle</dt>\n'
            f'    <dd class="name">{escape_html(display_name(name))}</dd>\n'
            f'    <dd class="roll">{escape_html(node.props.get("roll", ""))}</dd>\n'
            f'    <dd class="result">{escape_html(node.props.get("result", ""))}</dd>\n'
            f'  </dl>'
        )

    def _oracle_group(self, node: Node) -> str:
        name = node.props.get('name') or (node.args[0] if node.args else 'Oracle Group')
        oracles = ''.join(
            self.render_node(child) for child in node.children if child.keyword == 'oracle'
        )
        return (
            f'<div class="oracle-group">\n'
            f'    <span class="group-name">{escape_html(display_name(name))}</span>\n'
            f'    <blockquote>{oracles}</blockquote>\n'
            f'  </div>'
        )

    def _track_label(self, value: str) -> str:
        match = TRACK_LINK_PATTERN.match(value.strip())
        if not match:
            return display_name(value)
        return match.group(2) or file_stem(match.group(1))

    def _track(self, node: Node) -> str:
        value = node.props.get('name') or (node.args[0] if node.args else '')
        match = TRACK_LINK_PATTERN.match(value.strip())
        path = match.group(1) if match else ''
        label = self._track_label(value)
        status = node.props.get('status', 'added')
        return (
            f'<dl class="track-status">\n'
            f'    <dt>Track</dt>\n'
            f'    <dd class="track-name">{self.track_link(label, self.link_index.resolve_path(path))}</dd>\n'
            f'    <dd class="track-status" data-value="{escape_html(status)}">{escape_html(status)}</dd>\n'
            f'  </dl>'
        )

    def _meter(self, node: Node) -> str:
        name = node.args[0] if node.args else node.props.get('name', '')
        if not name:
            raise BlockParseError("meter: missing name")
        before = node.prop_int('from')
        after = node.prop_int('to')
        css = 'meter'
        if after > before:
            css += ' meter-increase'
        elif after < before:
            css += ' meter-decrease'
        return (
            f'<dl class="{css}">\n'
            f'    <dt>Meter</dt>\n'
            f'    <dd class="meter-name">{escape_html(display_name(name))}</dd>\n'
            f'    <dd class="from">{before}</dd>\n'
            f'    <dd class="to">{after}</dd>\n'
            f'  </dl>'
        )


def render_block(source: str, base_url: str = "", link_index: Optional[LinkIndex] = None) -> str:
    """Render one mechanics block with a throwaway renderer."""
    return BlockMechanicRenderer(base_url, link_index).render(source)
