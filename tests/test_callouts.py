"""Tests for callout conversion."""

from ironvault_publisher.transforms.callouts import (
    CALLOUT_HEADER_PATTERN,
    Callout,
    CalloutConverter,
    convert_callouts,
)
from ironvault_publisher.transforms.icons import IconTable


class TestCalloutHeader:
    """Tests for header parsing."""

    def test_type_and_title(self):
        callout = Callout.from_header(CALLOUT_HEADER_PATTERN.match("> [!Warning] Careful now"))
        assert callout.type == "warning"
        assert callout.title == "Careful now"
        assert not callout.collapsible

    def test_default_title_is_type(self):
        callout = Callout.from_header(CALLOUT_HEADER_PATTERN.match("> [!tip]"))
        assert callout.title == "TIP"

    def test_fold_markers(self):
        assert Callout.from_header(CALLOUT_HEADER_PATTERN.match("> [!note]- T")).collapsible
        assert Callout.from_header(CALLOUT_HEADER_PATTERN.match("> [!note]+ T")).collapsible

    def test_plain_quote_is_not_header(self):
        assert CALLOUT_HEADER_PATTERN.match("> just a quote") is None


class TestCalloutConverter:
    """Tests for the callout state machine."""

    def test_basic_callout(self):
        result = convert_callouts("> [!note] Title\n> Body text")

        assert 'data-callout="note"' in result
        assert 'class="callout"' in result
        assert '<div class="callout-title-inner">Title</div>' in result
        assert "lucide-pencil" in result
        assert "\n\nBody text\n\n" in result

    def test_text_outside_untouched(self):
        text = "Intro line\n\n> ordinary quote\n\nOutro"
        assert convert_callouts(text) == text

    def test_collapsible_callout(self):
        result = convert_callouts("> [!warning]- Hidden\n> Secret")

        assert 'class="callout is-collapsible is-collapsed"' in result
        assert 'data-callout-fold="-"' in result
        assert 'class="callout-fold is-collapsed"' in result
        assert 'style="display: none;"' in result

    def test_blank_line_then_quote_continues(self):
        result = convert_callouts("> [!note] T\n> first\n\n> second")

        assert result.count('class="callout"') == 1
        assert "first\n\nsecond" in result

    def test_blank_line_then_text_closes(self):
        result = convert_callouts("> [!note] T\n> inside\n\nafter")

        assert result.count('class="callout"') == 1
        assert result.endswith("</div>\n\nafter")

    def test_unquoted_line_closes(self):
        result = convert_callouts("> [!note] T\n> inside\nafter")
        assert result.endswith("</div>\nafter")

    def test_adjacent_callouts(self):
        result = convert_callouts("> [!note] A\n> one\n> [!tip] B\n> two")

        assert 'data-callout="note"' in result
        assert 'data-callout="tip"' in result
        assert result.count('class="callout"') == 2

    def test_callout_at_end_of_input(self):
        result = convert_callouts("text\n\n> [!info]")
        assert result.startswith("text\n\n<div")
        assert "INFO" in result

    def test_unknown_type_uses_default_icon(self):
        assert "lucide-info" in convert_callouts("> [!mystery] Huh")

    def test_title_is_escaped(self):
        result = convert_callouts("> [!note] <script>")
        assert "&lt;script&gt;" in result
        assert "<script>" not in result

    def test_crlf_input(self):
        result = convert_callouts("> [!note] T\r\n> Body")
        assert "\n\nBody\n\n" in result

    def test_conversion_is_idempotent(self):
        once = convert_callouts("Intro\n\n> [!note] T\n> Body\n\nOutro")
        assert convert_callouts(once) == once

    def test_custom_icon_table(self):
        icons = IconTable.from_dict({"vow": "<svg class=\"vow\"/>"})
        result = CalloutConverter(icons).convert("> [!vow] Swear")
        assert '<svg class="vow"/>' in result

    def test_fenced_code_untouched(self):
        text = "```markdown\n> [!note] x\n> y\n```"
        assert convert_callouts(text) == text

    def test_callout_after_fence(self):
        result = convert_callouts("~~~\n> [!note] x\n~~~\n> [!tip] Real")

        assert result.startswith("~~~\n> [!note] x\n~~~\n")
        assert 'data-callout="tip"' in result
        assert 'data-callout="note"' not in result

    def test_fence_closes_callout(self):
        result = convert_callouts("> [!note] T\n> body\n```\n> [!tip] x\n```")

        assert result.count('class="callout"') == 1
        assert result.endswith("</div>\n```\n> [!tip] x\n```")
