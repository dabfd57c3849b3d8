"""Mechanic directives: typed records parsed from pipe-delimited payloads.

Inline Iron Vault mechanics look like ``iv-move:Face Danger|Wits|4|2|0|3|8|ref``.
The namespace marker and kind come before the colon; the payload after it is
a fixed, positional list of fields per kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

NAMESPACE = 'iv-'
FIELD_SEPARATOR = '|'

# Track progress is four ticks per box on a ten box track.
TICKS_PER_BOX = 4
TRACK_BOXES = 10


class DirectiveError(ValueError):
    """A recognized directive whose fields have the wrong shape."""


class DirectiveKind(Enum):
    MOVE = 'move'
    ORACLE = 'oracle'
    METER = 'meter'
    INITIATIVE = 'initiative'
    TRACK_CREATE = 'track-create'
    TRACK_ADVANCE = 'track-advance'
    PROGRESS_ROLL = 'progress'
    NO_ROLL = 'noroll'
    ENTITY_CREATE = 'entity-create'


class Outcome(Enum):
    STRONG_HIT = 'strong-hit'
    WEAK_HIT = 'weak-hit'
    MISS = 'miss'


def classify(score: int, vs1: int, vs2: int) -> Outcome:
    """Classify a roll: beat both challenge dice, one of them, or neither."""
    if score > vs1 and score > vs2:
        return Outcome.STRONG_HIT
    if score > vs1 or score > vs2:
        return Outcome.WEAK_HIT
    return Outcome.MISS


def is_match(vs1: int, vs2: int) -> bool:
    """Equal challenge dice are a match, whatever the outcome."""
    return vs1 == vs2


def tokenize(code: str) -> Optional[Tuple[str, List[str]]]:
    """Split ``<namespace><kind>:<f1>|<f2>|...`` into kind and fields.

    Returns:
        ``(kind, fields)`` or None when the namespace marker or colon is missing
    """
    if not code.startswith(NAMESPACE):
        return None
    kind, sep, payload = code.partition(':')
    if not sep:
        return None
    return kind[len(NAMESPACE):], payload.split(FIELD_SEPARATOR)


def to_int(value: str, default: int = 0) -> int:
    """Parse a leading integer the way the plugin writes them; else default."""
    value = value.strip()
    digits = ''
    for i, ch in enumerate(value):
        if ch.isdigit() or (i == 0 and ch in '+-'):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return default


class Fields:
    """Positional field accessor; missing fields read as empty or zero."""

    def __init__(self, values: List[str]):
        self.values = values

    def text(self, index: int) -> str:
        return self.values[index].strip() if index < len(self.values) else ''

    def number(self, index: int, default: int = 0) -> int:
        return to_int(self.text(index), default)

    def require(self, *indexes: int) -> None:
        for index in indexes:
            if not self.text(index):
                raise DirectiveError(f"missing field {index + 1}")


@dataclass(frozen=True)
class RollResult:
    """Score against two challenge dice."""

    score: int
    vs1: int
    vs2: int

    @property
    def outcome(self) -> Outcome:
        return classify(self.score, self.vs1, self.vs2)

    @property
    def match(self) -> bool:
        return is_match(self.vs1, self.vs2)

    @property
    def css_classes(self) -> List[str]:
        classes = [self.outcome.value]
        if self.match:
            classes.append('match')
        return classes


@dataclass(frozen=True)
class MoveDirective:
    name: str
    stat: str
    action: int
    stat_value: int
    adds: int
    vs1: int
    vs2: int
    move_ref: str = ''

    @property
    def roll(self) -> RollResult:
        return RollResult(self.action + self.stat_value + self.adds, self.vs1, self.vs2)

    @classmethod
    def from_fields(cls, f: Fields) -> "MoveDirective":
        f.require(0)
        return cls(f.text(0), f.text(1), f.number(2), f.number(3), f.number(4),
                   f.number(5), f.number(6), f.text(7))


@dataclass(frozen=True)
class OracleDirective:
    name: str
    roll: str
    result: str
    oracle_ref: str = ''

    @classmethod
    def from_fields(cls, f: Fields) -> "OracleDirective":
        f.require(0)
        return cls(f.text(0), f.text(1), f.text(2), f.text(3))


@dataclass(frozen=True)
class MeterDirective:
    name: str
    from_value: int
    to_value: int

    @property
    def delta(self) -> int:
        return self.to_value - self.from_value

    @classmethod
    def from_fields(cls, f: Fields) -> "MeterDirective":
        f.require(0)
        return cls(f.text(0), f.number(1), f.number(2))


@dataclass(frozen=True)
class InitiativeDirective:
    label: str
    from_state: str
    to_state: str

    @property
    def state(self) -> str:
        return self.to_state or self.from_state

    @property
    def in_control(self) -> bool:
        return 'control' in self.state.lower()

    @classmethod
    def from_fields(cls, f: Fields) -> "InitiativeDirective":
        f.require(0)
        return cls(f.text(0), f.text(1), f.text(2))


@dataclass(frozen=True)
class TrackCreateDirective:
    name: str
    path: str

    @classmethod
    def from_fields(cls, f: Fields) -> "TrackCreateDirective":
        f.require(0)
        return cls(f.text(0), f.text(1))


@dataclass(frozen=True)
class TrackAdvanceDirective:
    name: str
    path: str
    from_ticks: int
    to_ticks: int
    rank: str
    steps: int

    @property
    def boxes(self) -> int:
        return self.to_ticks // TICKS_PER_BOX

    @classmethod
    def from_fields(cls, f: Fields) -> "TrackAdvanceDirective":
        f.require(0)
        return cls(f.text(0), f.text(1), f.number(2), f.number(3), f.text(4),
                   f.number(5, default=1) or 1)


@dataclass(frozen=True)
class ProgressRollDirective:
    name: str
    progress: int
    vs1: int
    vs2: int
    path: str = ''

    @property
    def roll(self) -> RollResult:
        return RollResult(self.progress, self.vs1, self.vs2)

    @classmethod
    def from_fields(cls, f: Fields) -> "ProgressRollDirective":
        f.require(0)
        return cls(f.text(0), f.number(1), f.number(2), f.number(3), f.text(4))


@dataclass(frozen=True)
class NoRollDirective:
    name: str
    move_ref: str = ''

    @classmethod
    def from_fields(cls, f: Fields) -> "NoRollDirective":
        f.require(0)
        return cls(f.text(0), f.text(1))


@dataclass(frozen=True)
class EntityCreateDirective:
    entity_type: str
    name: str
    path: str

    @classmethod
    def from_fields(cls, f: Fields) -> "EntityCreateDirective":
        f.require(0, 1)
        return cls(f.text(0), f.text(1), f.text(2))


DIRECTIVE_TYPES: Dict[DirectiveKind, type] = {
    DirectiveKind.MOVE: MoveDirective,
    DirectiveKind.ORACLE: OracleDirective,
    DirectiveKind.METER: MeterDirective,
    DirectiveKind.INITIATIVE: InitiativeDirective,
    DirectiveKind.TRACK_CREATE: TrackCreateDirective,
    DirectiveKind.TRACK_ADVANCE: TrackAdvanceDirective,
    DirectiveKind.PROGRESS_ROLL: ProgressRollDirective,
    DirectiveKind.NO_ROLL: NoRollDirective,
    DirectiveKind.ENTITY_CREATE: EntityCreateDirective,
}


def parse_directive(code: str):
    """Parse inline code into a directive record.

    Returns:
        ``(kind, directive)``, or None for code that is not a known directive

    Raises:
        DirectiveError: A known directive with malformed fields
    """
    tokens = tokenize(code)
    if tokens is None:
        return None
    kind_name, values = tokens
    try:
        kind = DirectiveKind(kind_name)
    except ValueError:
        return None
    return kind, DIRECTIVE_TYPES[kind].from_fields(Fields(values))
