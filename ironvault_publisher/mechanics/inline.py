"""Inline Iron Vault mechanics: ``iv-*`` inline code to HTML spans.

The markup follows the class names of the Iron Vault Obsidian plugin so its
stylesheet can be reused unchanged.
"""

from typing import Callable, Dict, Optional

from loguru import logger

from ironvault_publisher.core.models import LinkIndex
from ironvault_publisher.mechanics.directives import (
    DirectiveError,
    DirectiveKind,
    EntityCreateDirective,
    InitiativeDirective,
    MeterDirective,
    MoveDirective,
    NoRollDirective,
    OracleDirective,
    ProgressRollDirective,
    TRACK_BOXES,
    TrackAdvanceDirective,
    TrackCreateDirective,
    parse_directive,
)
from ironvault_publisher.transforms.icons import DEFAULT_ICONS, IconTable
from ironvault_publisher.transforms.links import escape_html, html_anchor


class InlineMechanicRenderer:
    """Renders inline mechanic directives to HTML fragments."""

    def __init__(
        self,
        base_url: str = "",
        link_index: Optional[LinkIndex] = None,
        icons: IconTable = DEFAULT_ICONS,
    ):
        """Initialize InlineMechanicRenderer.

        Args:
            base_url: URL prefix for links to tracks and entities
            link_index: Lookup used to resolve track and entity paths
            icons: Icon table for track and entity markers
        """
        self.link_index = link_index or LinkIndex({})
        self.icons = icons
        self.track_link = html_anchor(base_url, 'iv-inline-track-name iv-inline-link')
        self.entity_link = html_anchor(base_url, 'iv-inline-entity-name iv-inline-link')
        self._renderers: Dict[DirectiveKind, Callable[..., str]] = {
            DirectiveKind.MOVE: self._move,
            DirectiveKind.ORACLE: self._oracle,
            DirectiveKind.METER: self._meter,
            DirectiveKind.INITIATIVE: self._initiative,
            DirectiveKind.TRACK_CREATE: self._track_create,
            DirectiveKind.TRACK_ADVANCE: self._track_advance,
            DirectiveKind.PROGRESS_ROLL: self._progress_roll,
            DirectiveKind.NO_ROLL: self._no_roll,
            DirectiveKind.ENTITY_CREATE: self._entity_create,
        }

    def render(self, code: str) -> Optional[str]:
        """Render one inline code span.

        Args:
            code: Inline code content, e.g. ``iv-meter:Momentum|2|5``

        Returns:
            HTML fragment, or None if the code is not a mechanic directive
        """
        try:
            parsed = parse_directive(code)
        except DirectiveError as e:
            logger.debug(f"Malformed inline mechanic {code!r}: {e}")
            return f'<span class="iv-inline-mechanics iv-parse-error">{escape_html(code)}</span>'

        if parsed is None:
            return None
        kind, directive = parsed
        return self._renderers[kind](directive)

    def _move(self, move: MoveDirective) -> str:
        roll = move.roll
        classes = ' '.join(['iv-inline-mechanics'] + roll.css_classes)
        match = '<span class="iv-inline-match">match</span>' if roll.match else ''
        return (
            f'<span class="{classes}">'
            f'<span class="iv-inline-move-name iv-inline-link">{escape_html(move.name)}</span>'
            f'<span class="iv-inline-stat">({escape_html(move.stat)})</span>'
            f'<span class="iv-inline-outcome-icon"></span>'
            f'<span>;</span>'
            f'<span class="iv-inline-score">{roll.score}</span>'
            f'<span>vs</span>'
            f'<span class="iv-inline-challenge-die vs1">{roll.vs1}</span>'
            f'<span>|</span>'
            f'<span class="iv-inline-challenge-die vs2">{roll.vs2}</span>'
            f'{match}'
            f'</span>'
        )

    def _oracle(self, oracle: OracleDirective) -> str:
        return (
            f'<span class="iv-inline-mechanics oracle">'
            f'<span class="iv-inline-oracle-name iv-inline-link">{escape_html(oracle.name)}</span>'
            f'<span>({escape_html(oracle.roll)})</span>'
            f'<span class="iv-inline-oracle-result">{escape_html(oracle.result)}</span>'
            f'</span>'
        )

    def _meter(self, meter: MeterDirective) -> str:
        if meter.delta > 0:
            css = 'iv-inline-mechanics meter-increase'
        elif meter.delta < 0:
            css = 'iv-inline-mechanics meter-decrease'
        else:
            css = 'iv-inline-mechanics'
        return (
            f'<span class="{css}">'
            f'<span class="iv-inline-meter-name">{escape_html(meter.name)}:</span>'
            f'<span class="iv-inline-meter-change">{meter.from_value} → {meter.to_value}</span>'
            f'</span>'
        )

    def _initiative(self, initiative: InitiativeDirective) -> str:
        css = 'initiative-control' if initiative.in_control else 'initiative-bad-spot'
        return (
            f'<span class="iv-inline-mechanics {css}">'
            f'<span class="iv-inline-initiative-label">{escape_html(initiative.label)}:</span>'
            f'<span class="iv-inline-initiative-state">{escape_html(initiative.state)}</span>'
            f'</span>'
        )

    def _track_create(self, track: TrackCreateDirective) -> str:
        return (
            f'<span class="iv-inline-mechanics track-create">'
            f'<span class="iv-inline-track-icon">{self.icons.track_create}</span>'
            f'{self.track_link(track.name, self.link_index.resolve_path(track.path))}'
            f'</span>'
        )

    def _track_advance(self, track: TrackAdvanceDirective) -> str:
        return (
            f'<span class="iv-inline-mechanics track-advance">'
            f'<span class="iv-inline-track-icon">{self.icons.track_advance}</span>'
            f'{self.track_link(track.name, self.link_index.resolve_path(track.path))}'
            f'<span class="iv-inline-track-progress"> +{track.steps} ({track.boxes}/{TRACK_BOXES})</span>'
            f'</span>'
        )

    def _progress_roll(self, progress: ProgressRollDirective) -> str:
        roll = progress.roll
        classes = ' '.join(['iv-inline-mechanics'] + roll.css_classes)
        return (
            f'<span class="{classes}">'
            f'<span class="iv-inline-progress-name iv-inline-link">{escape_html(progress.name)}</span>'
            f'<span class="iv-inline-outcome-icon"></span>'
            f'<span>; </span>'
            f'<span class="iv-inline-score">{roll.score}</span>'
            f'<span> vs </span>'
            f'<span class="iv-inline-challenge-die vs1">{roll.vs1}</span>'
            f'<span>|</span>'
            f'<span class="iv-inline-challenge-die vs2">{roll.vs2}</span>'
            f'</span>'
        )

    def _no_roll(self, move: NoRollDirective) -> str:
        return (
            f'<span class="iv-inline-mechanics no-roll">'
            f'<span class="iv-inline-move-name iv-inline-link">{escape_html(move.name)}</span>'
            f'</span>'
        )

    def _entity_create(self, entity: EntityCreateDirective) -> str:
        return (
            f'<span class="iv-inline-mechanics entity-create">'
            f'<span class="iv-inline-entity-icon">{self.icons.entity_create}</span>'
            f'<span class="iv-inline-entity-type">{escape_html(entity.entity_type)}:</span>'
            f'{self.entity_link(entity.name, self.link_index.resolve_path(entity.path))}'
            f'</span>'
        )
