"""Tests for inline mechanic rendering."""

import pytest

from ironvault_publisher.core.models import Document, LinkIndex
from ironvault_publisher.mechanics.inline import InlineMechanicRenderer


@pytest.fixture
def renderer():
    index = LinkIndex.from_documents([
        Document.from_path("Progress/Vow to Kira.md"),
        Document.from_path("Characters/Kira Vale.md"),
    ])
    return InlineMechanicRenderer(base_url="/site", link_index=index)


class TestInlineMechanicRenderer:
    """Tests for InlineMechanicRenderer."""

    def test_meter_increase(self, renderer):
        html = renderer.render("iv-meter:Momentum|2|5")

        assert 'class="iv-inline-mechanics meter-increase"' in html
        assert "Momentum:" in html
        assert "2 → 5" in html

    def test_meter_decrease(self, renderer):
        assert "meter-decrease" in renderer.render("iv-meter:Health|5|3")

    def test_meter_unchanged(self, renderer):
        html = renderer.render("iv-meter:Supply|3|3")
        assert "meter-increase" not in html
        assert "meter-decrease" not in html

    def test_move_miss(self, renderer):
        html = renderer.render("iv-move:Face Danger|Wits|1|2|0|9|4")

        assert 'class="iv-inline-mechanics miss"' in html
        assert '<span class="iv-inline-score">3</span>' in html
        assert "iv-inline-match" not in html

    def test_move_match(self, renderer):
        html = renderer.render("iv-move:Strike|Iron|6|3|0|4|4")

        assert 'class="iv-inline-mechanics strong-hit match"' in html
        assert '<span class="iv-inline-match">match</span>' in html

    def test_oracle(self, renderer):
        html = renderer.render("iv-oracle:Action|42|Bolster")

        assert "iv-inline-oracle-name" in html
        assert "(42)" in html
        assert "Bolster" in html

    def test_initiative(self, renderer):
        assert "initiative-control" in renderer.render("iv-initiative:Position|bad spot|in control")
        assert "initiative-bad-spot" in renderer.render("iv-initiative:Position|in control|bad spot")

    def test_track_create_links_to_track(self, renderer):
        html = renderer.render("iv-track-create:Vow to Kira|Progress/Vow to Kira.md")

        assert '<a href="/site/progress/vow-to-kira" class="iv-inline-track-name iv-inline-link">Vow to Kira</a>' in html
        assert "lucide-square-stack" in html

    def test_track_advance(self, renderer):
        html = renderer.render("iv-track-advance:Vow to Kira|Progress/Vow to Kira.md|8|13|dangerous")

        assert "track-advance" in html
        assert "+1 (3/10)" in html

    def test_track_path_falls_back_to_slug_rule(self, renderer):
        html = renderer.render("iv-track-create:Unknown|Progress/Unknown Vow.md")
        assert 'href="/site/progress/unknown-vow"' in html

    def test_track_without_path(self, renderer):
        html = renderer.render("iv-track-create:Loose Vow")
        assert 'href="#"' in html

    def test_entity_create(self, renderer):
        html = renderer.render("iv-entity-create:Character|Kira|Characters/Kira Vale.md")

        assert "Character:" in html
        assert '<a href="/site/characters/kira-vale" class="iv-inline-entity-name iv-inline-link">Kira</a>' in html

    def test_progress_roll(self, renderer):
        html = renderer.render("iv-progress:Vow to Kira|9|3|5")
        assert "strong-hit" in html

    def test_no_roll(self, renderer):
        assert "no-roll" in renderer.render("iv-noroll:Begin the Session")

    def test_names_are_escaped(self, renderer):
        html = renderer.render("iv-meter:<b>Spirit</b>|1|2")
        assert "&lt;b&gt;Spirit&lt;/b&gt;" in html

    def test_malformed_directive(self, renderer):
        html = renderer.render("iv-move:|Wits|1|2|0|3|4")
        assert 'class="iv-inline-mechanics iv-parse-error"' in html

    def test_unknown_kind_passes_through(self, renderer):
        assert renderer.render("iv-clock:Doom|2|6") is None

    def test_plain_code_passes_through(self, renderer):
        assert renderer.render("print()") is None
