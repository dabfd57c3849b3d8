"""Content processor for transforming Iron Vault notes to HTML."""

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import inflection
from loguru import logger

from ironvault_publisher.core.markdown import MarkdownRenderer, RenderContext
from ironvault_publisher.core.models import Document, LinkIndex, RenderedDocument
from ironvault_publisher.transforms.callouts import CalloutConverter
from ironvault_publisher.transforms.fences import map_prose
from ironvault_publisher.transforms.icons import DEFAULT_ICONS, IconTable
from ironvault_publisher.transforms.links import absolute_link, anchor_slug, escape_html, url_for

IMAGE_EXTENSIONS = ('png', 'jpg', 'jpeg', 'gif', 'svg', 'webp')


class ContentProcessor:
    """Processes Iron Vault note content into HTML.

    Handles, in order:
    - Line ending normalization and code fence spacing
    - Callout conversion
    - Image embeds, then note embeds, then wikilinks, outside code
    - Markdown rendering with mechanics and dataview substitution
    """

    # Pattern for image embeds: ![[image.png]] or ![[image.png|300|center]]
    IMAGE_EMBED_PATTERN = re.compile(
        r'!\[\[([^\]|]+\.(?:' + '|'.join(IMAGE_EXTENSIONS) + r'))(?:\|([^\]]+))?\]\]',
        re.IGNORECASE,
    )

    # Pattern for generic embeds (notes): ![[note]]
    NOTE_EMBED_PATTERN = re.compile(r'!\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')

    # Pattern for wikilinks: [[target]] or [[target|display]]
    WIKILINK_PATTERN = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')

    # A code fence directly under a line of text
    FENCE_SPACING_PATTERN = re.compile(r'([^\n])\n(```)')

    def __init__(
        self,
        documents: Sequence[Document],
        base_url: str = "",
        attachments_prefix: str = "/attachments",
        icons: IconTable = DEFAULT_ICONS,
        link_index: Optional[LinkIndex] = None,
        warn_on_missing_link: bool = True,
    ):
        """Initialize ContentProcessor.

        Args:
            documents: Full document set, used for link lookup and queries
            base_url: Prefix for every generated site link
            attachments_prefix: Path under base_url where images live
            icons: Icon table for callouts and mechanics
            link_index: Prebuilt index; built from documents when omitted
            warn_on_missing_link: Whether to warn about unresolved wikilinks
        """
        self.documents = list(documents)
        self.base_url = base_url.rstrip('/')
        self.attachments_prefix = '/' + attachments_prefix.strip('/')
        self.link_index = link_index or LinkIndex.from_documents(self.documents)
        self.link_transform = absolute_link(self.base_url)
        self.warn_on_missing_link = warn_on_missing_link
        self.callouts = CalloutConverter(icons)
        self.markdown = MarkdownRenderer(RenderContext(
            documents=self.documents,
            link_index=self.link_index,
            base_url=self.base_url,
            icons=icons,
        ))

    def process(self, document: Document, content: Optional[str] = None) -> RenderedDocument:
        """Render one document.

        Args:
            document: The document to render
            content: Body text; read from the document source when omitted

        Returns:
            RenderedDocument with HTML and unresolved link targets
        """
        if content is None:
            if document.source is None:
                raise ValueError(f"No content or source for {document.path}")
            content = extract_content(document.source.read_text(encoding='utf-8'))

        html, missing = self.render_with_links(content)
        if missing and self.warn_on_missing_link:
            logger.warning(f"Unresolved links in {document.path}: {', '.join(missing)}")
        return RenderedDocument(document=document, html=html, missing_links=missing)

    def render(self, content: str) -> str:
        """Render bare markdown text to HTML."""
        html, _ = self.render_with_links(content)
        return html

    def render_with_links(self, content: str) -> Tuple[str, List[str]]:
        """Render text to HTML, also returning unresolved link targets."""
        missing: List[str] = []

        def rewrite(prose: str) -> str:
            # Images must be processed before note embeds and wikilinks
            text, found = self._process_links(self._process_images(prose))
            missing.extend(found)
            return text

        text = self.callouts.convert(self.preprocess(content))
        return self.markdown.render(map_prose(text, rewrite)), missing

    def preprocess(self, content: str) -> str:
        """Normalize line endings and separate code fences from the text above."""
        text = content.replace('\r\n', '\n').replace('\r', '\n')
        return self.FENCE_SPACING_PATTERN.sub(r'\1\n\n\2', text)

    def _process_images(self, content: str) -> str:
        """Convert image embeds to markdown images or sized ``<img>`` tags."""
        def replace_image(match: re.Match) -> str:
            image_name = match.group(1).strip()
            options = match.group(2)
            stem = Path(image_name).stem
            src = self.image_url(image_name)

            if not options:
                return f"![{stem}]({src})"

            parts = [p.strip() for p in options.split('|')]
            size = next((p for p in parts if p.isdigit()), None)
            align = next((p for p in parts if p in ('center', 'left', 'right')), None)
            style = ''
            if size:
                style += f'width: {size}px;'
            if align == 'center':
                style += 'display: block; margin: 0 auto;'
            return f'<img src="{escape_html(src)}" alt="{escape_html(stem)}" style="{style}" />'

        return self.IMAGE_EMBED_PATTERN.sub(replace_image, content)

    def image_url(self, image_name: str) -> str:
        """Site URL of an attachment: parameterized stem, lowercase extension."""
        path = Path(image_name)
        slug = inflection.parameterize(path.stem)
        return f"{self.base_url}{self.attachments_prefix}/{slug}{path.suffix.lower()}"

    def _process_links(self, content: str) -> Tuple[str, List[str]]:
        """Convert note embeds, then wikilinks.

        Returns:
            Tuple of (transformed content, list of missing link targets)
        """
        missing_links: List[str] = []

        def resolve(target: str) -> Tuple[str, str, str]:
            section = ''
            note_target = target
            if '#' in target:
                note_target, section = target.split('#', 1)
                note_target = note_target.strip()
            if not note_target:
                return '', '', section

            slug = self.link_index.get_slug(note_target)
            if slug is None:
                slug = self.link_index.resolve(note_target)
                missing_links.append(note_target)
            return note_target, slug, section

        def replace_embed(match: re.Match) -> str:
            target = match.group(1).strip()
            display = match.group(2) or target
            _, slug, _ = resolve(target)
            href = url_for(self.base_url, slug)
            return (
                f'<div class="embed-link"><a href="{escape_html(href)}">'
                f'{escape_html(display)}</a></div>'
            )

        def replace_link(match: re.Match) -> str:
            target = match.group(1).strip()
            display = match.group(2)
            note_target, slug, section = resolve(target)

            if not note_target:
                text = display or section
                return f"[{text}](#{anchor_slug(section)})"

            result = self.link_transform(display or note_target, slug)
            # Append section anchor by inserting before closing paren
            if section:
                result = result[:-1] + f"#{anchor_slug(section)})"
            return result

        content = self.NOTE_EMBED_PATTERN.sub(replace_embed, content)
        content = self.WIKILINK_PATTERN.sub(replace_link, content)
        return content, missing_links


def extract_content(raw_content: str) -> str:
    """Extract content after frontmatter.

    Args:
        raw_content: Full file content including frontmatter

    Returns:
        Content without frontmatter
    """
    normalized = raw_content.replace('\r\n', '\n')
    if not normalized.startswith('---'):
        return raw_content

    parts = normalized.split('---\n', 2)
    if len(parts) >= 3:
        return parts[2]
    return raw_content
