"""Tests for inline mechanic directive parsing."""

import pytest

from ironvault_publisher.mechanics.directives import (
    DirectiveError,
    DirectiveKind,
    Outcome,
    RollResult,
    classify,
    is_match,
    parse_directive,
    to_int,
    tokenize,
)


class TestOutcome:
    """Tests for roll classification."""

    @pytest.mark.parametrize("score,vs1,vs2,expected", [
        (7, 3, 6, Outcome.STRONG_HIT),
        (6, 3, 8, Outcome.WEAK_HIT),
        (6, 8, 3, Outcome.WEAK_HIT),
        (3, 9, 4, Outcome.MISS),
        (5, 5, 5, Outcome.MISS),
        (5, 5, 4, Outcome.WEAK_HIT),
    ])
    def test_classify(self, score, vs1, vs2, expected):
        assert classify(score, vs1, vs2) is expected

    def test_match_independent_of_outcome(self):
        assert is_match(4, 4)
        assert not is_match(4, 5)
        assert RollResult(10, 2, 2).css_classes == ["strong-hit", "match"]
        assert RollResult(1, 9, 9).css_classes == ["miss", "match"]


class TestTokenize:
    """Tests for splitting inline code."""

    def test_kind_and_fields(self):
        assert tokenize("iv-meter:Momentum|2|5") == ("meter", ["Momentum", "2", "5"])

    def test_missing_namespace(self):
        assert tokenize("meter:Momentum|2|5") is None

    def test_missing_colon(self):
        assert tokenize("iv-meter") is None

    def test_to_int(self):
        assert to_int("7") == 7
        assert to_int(" -2 ") == -2
        assert to_int("3rd") == 3
        assert to_int("abc") == 0
        assert to_int("") == 0


class TestParseDirective:
    """Tests for typed directive records."""

    def test_move_miss(self):
        kind, move = parse_directive("iv-move:Face Danger|Wits|1|2|0|9|4")

        assert kind is DirectiveKind.MOVE
        assert move.name == "Face Danger"
        assert move.stat == "Wits"
        assert move.roll.score == 3
        assert move.roll.outcome is Outcome.MISS
        assert not move.roll.match

    def test_missing_numbers_are_zero(self):
        _, meter = parse_directive("iv-meter:Health")
        assert meter.from_value == 0
        assert meter.to_value == 0

    def test_non_numeric_is_zero(self):
        _, meter = parse_directive("iv-meter:Spirit|abc|3")
        assert meter.from_value == 0
        assert meter.delta == 3

    def test_unknown_kind(self):
        assert parse_directive("iv-clock:Doom|2|6") is None

    def test_not_a_directive(self):
        assert parse_directive("print()") is None

    def test_blank_name_is_error(self):
        with pytest.raises(DirectiveError):
            parse_directive("iv-move:|Wits|1|2|0|3|4")

    def test_entity_create_requires_type_and_name(self):
        with pytest.raises(DirectiveError):
            parse_directive("iv-entity-create:Character||Characters/Kira.md")

        _, entity = parse_directive("iv-entity-create:Character|Kira|Characters/Kira.md")
        assert entity.entity_type == "Character"
        assert entity.path == "Characters/Kira.md"

    def test_track_advance_boxes(self):
        _, track = parse_directive("iv-track-advance:Vow|Progress/Vow.md|8|13|dangerous")

        assert track.boxes == 3
        assert track.steps == 1

    def test_track_advance_steps(self):
        _, track = parse_directive("iv-track-advance:Vow|Progress/Vow.md|8|24|dangerous|2")
        assert track.steps == 2

    def test_progress_roll(self):
        kind, progress = parse_directive("iv-progress:Vow to Kira|7|3|9")

        assert kind is DirectiveKind.PROGRESS_ROLL
        assert progress.roll.outcome is Outcome.WEAK_HIT

    def test_initiative(self):
        _, initiative = parse_directive("iv-initiative:Position|bad spot|in control")

        assert initiative.state == "in control"
        assert initiative.in_control
