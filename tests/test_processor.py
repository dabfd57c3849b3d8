"""Tests for ContentProcessor."""

import pytest

from ironvault_publisher.core.models import Document, LinkIndex
from ironvault_publisher.core.processor import ContentProcessor, extract_content


@pytest.fixture
def processor(documents):
    return ContentProcessor(documents)


class TestLinkIndex:
    """Tests for LinkIndex."""

    def test_from_documents_by_title_and_stem(self):
        doc = Document.from_path("Characters/Kira Vale.md", frontmatter={"title": "Kira"})
        index = LinkIndex.from_documents([doc])

        assert index.get_slug("Kira") == "characters/kira-vale"
        assert index.get_slug("Kira Vale") == "characters/kira-vale"

    def test_case_insensitive(self, documents):
        index = LinkIndex.from_documents(documents)
        assert index.get_slug("KIRA VALE") == "characters/kira-vale"

    def test_not_found(self, documents):
        index = LinkIndex.from_documents(documents)

        assert index.get_slug("Nowhere") is None
        assert index.resolve("Nowhere Land") == "nowhere-land"

    def test_resolve_path(self, documents):
        index = LinkIndex.from_documents(documents)

        assert index.resolve_path("Elsewhere/Vow to Kira.md") == "progress/vow-to-kira"
        assert index.resolve_path("") == ""


class TestWikilinks:
    """Tests for wikilink conversion."""

    def test_simple_link(self, processor):
        html = processor.render("See [[Kira Vale]].")
        assert '<p>See <a href="/characters/kira-vale">Kira Vale</a>.</p>' in html

    def test_display_text(self, processor):
        assert '<a href="/characters/kira-vale">Kira</a>' in processor.render("[[Kira Vale|Kira]]")

    def test_section_anchor(self, processor):
        html = processor.render("[[Kira Vale#Background Notes]]")
        assert 'href="/characters/kira-vale#background-notes"' in html

    def test_same_page_section(self, processor):
        assert '<a href="#background">Background</a>' in processor.render("[[#Background]]")

    def test_missing_link_reported(self, processor):
        html, missing = processor.render_with_links("[[Nowhere Land]] and [[Kira Vale]]")

        assert missing == ["Nowhere Land"]
        assert 'href="/nowhere-land"' in html

    def test_base_url(self, documents):
        processor = ContentProcessor(documents, base_url="/campaign/")
        assert 'href="/campaign/characters/kira-vale"' in processor.render("[[Kira Vale]]")


class TestEmbeds:
    """Tests for image and note embeds."""

    def test_image_embed(self, processor):
        html = processor.render("![[Map Sketch.PNG]]")

        assert 'src="/attachments/map-sketch.png"' in html
        assert 'alt="Map Sketch"' in html

    def test_image_with_size_and_alignment(self, processor):
        html = processor.render("![[map.png|300|center]]")
        assert 'style="width: 300px;display: block; margin: 0 auto;"' in html

    def test_attachments_prefix(self, documents):
        processor = ContentProcessor(documents, base_url="/site", attachments_prefix="media/")
        assert 'src="/site/media/map.png"' in processor.render("![[map.png]]")

    def test_note_embed(self, processor):
        html = processor.render("![[Kira Vale]]")
        assert '<div class="embed-link"><a href="/characters/kira-vale">Kira Vale</a></div>' in html


class TestPipeline:
    """Tests for the full rendering pipeline."""

    def test_callout_body_is_markdown(self, processor):
        html = processor.render("> [!note] Title\n> Body with [[Kira Vale]]")

        assert 'class="callout"' in html
        assert '<p>Body with <a href="/characters/kira-vale">Kira Vale</a></p>' in html

    def test_fence_spacing(self, processor):
        assert processor.preprocess("text\n```js\nx\n```").startswith("text\n\n```js")

    def test_code_fence_body_trimmed(self, processor):
        html = processor.render("Some text\n```python\nprint(1)\n```")
        assert '<code class="language-python">print(1)</code>' in html

    def test_mechanics_block(self, processor):
        html = processor.render('Text\n```iron-vault-mechanics\nmeter "Momentum" from=2 to=5\n```')

        assert '<div class="iron-vault-mechanics">' in html
        assert '<dl class="meter meter-increase">' in html
        assert "<pre>" not in html

    def test_dataview_block(self, processor):
        html = processor.render("```dataview\nLIST\nFROM #vow\n```")
        assert '<a href="/progress/vow-to-kira">Vow to Kira</a>' in html

    def test_dataview_wikilink_literal(self, processor):
        html = processor.render("```dataview\nLIST\nWHERE status = [[Done]]\n```")

        assert '<a href="/progress/vow-to-kira">Vow to Kira</a>' in html
        assert "No results" not in html

    def test_dataview_where_example(self, processor):
        html = processor.render("```dataview\nTABLE WITHOUT ID file.link\nWHERE faction = [[Iron Syndicate]]\n```")
        assert '<a href="/characters/kira-vale">Kira Vale</a>' in html

    def test_mechanics_track_link(self, processor):
        html = processor.render(
            '```iron-vault-mechanics\n'
            'track name="[[Progress/Vow to Kira.md|Vow to Kira]]" status="advanced"\n'
            '```'
        )
        assert '<a href="/progress/vow-to-kira">Vow to Kira</a>' in html

    def test_fenced_code_keeps_wikilinks(self, processor):
        html = processor.render("```\n[[Kira Vale]] ![[map.png]]\n```")
        assert "<code>[[Kira Vale]] ![[map.png]]</code>" in html

    def test_fenced_code_keeps_callouts(self, processor):
        html = processor.render("```\n> [!note] x\n> y\n```")

        assert "<code>&gt; [!note] x\n&gt; y</code>" in html
        assert "data-callout" not in html

    def test_inline_code_keeps_wikilinks(self, processor):
        html, missing = processor.render_with_links("Type `[[Note]]` to link [[Kira Vale]].")

        assert "<code>[[Note]]</code>" in html
        assert 'href="/characters/kira-vale"' in html
        assert missing == []

    def test_placeholder_block(self, processor):
        html = processor.render("```iron-vault-character-meters\n```")
        assert '<div class="iron-vault-character-meters-placeholder"></div>' in html

    def test_inline_mechanic(self, processor):
        html = processor.render("Rolled `iv-move:Face Danger|Wits|4|2|0|3|8` today")

        assert '<span class="iv-inline-mechanics weak-hit">' in html
        assert "<code>" not in html

    def test_plain_inline_code(self, processor):
        assert "<code>print()</code>" in processor.render("`print()`")

    def test_unknown_directive_left_as_code(self, processor):
        assert "<code>iv-clock:x</code>" in processor.render("`iv-clock:x`")

    def test_gfm_extensions(self, processor):
        html = processor.render("~~gone~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\n- [x] done")

        assert "<s>gone</s>" in html
        assert "<table>" in html
        assert 'type="checkbox"' in html

    def test_crlf_input(self, processor):
        assert "<p>one\ntwo</p>" in processor.render("one\r\ntwo")


class TestProcess:
    """Tests for ContentProcessor.process."""

    def test_process_with_content(self, processor, documents):
        rendered = processor.process(documents[0], "[[Bleakhold]] and [[Ghost Ship]]")

        assert rendered.document == documents[0]
        assert 'href="/locations/bleakhold"' in rendered.html
        assert rendered.missing_links == ["Ghost Ship"]

    def test_process_reads_source(self, tmp_path):
        note = tmp_path / "Kira.md"
        note.write_text("---\ntitle: Kira\n---\n# Kira\n")
        doc = Document.from_path("Kira.md", frontmatter={"title": "Kira"}, source=note)

        rendered = ContentProcessor([doc]).process(doc)

        assert "<h1>Kira</h1>" in rendered.html
        assert "title:" not in rendered.html

    def test_process_without_source(self, processor):
        with pytest.raises(ValueError):
            processor.process(Document.from_path("Ghost.md"))


class TestExtractContent:
    """Tests for extract_content."""

    def test_strips_frontmatter(self):
        assert extract_content("---\ntitle: Test\n---\nBody") == "Body"

    def test_no_frontmatter(self):
        assert extract_content("Just content") == "Just content"

    def test_crlf_frontmatter(self):
        assert extract_content("---\r\ntitle: Test\r\n---\r\nBody") == "Body"
