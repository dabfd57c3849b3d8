"""Markdown engine with Iron Vault and dataview node substitution.

Text is parsed to a markdown-it token stream; reserved fence languages and
``iv-*`` inline code are swapped for raw HTML tokens before rendering.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from ironvault_publisher import dataview
from ironvault_publisher.core.models import Document, LinkIndex
from ironvault_publisher.mechanics import blocks
from ironvault_publisher.mechanics.blocks import BlockMechanicRenderer
from ironvault_publisher.mechanics.directives import NAMESPACE
from ironvault_publisher.mechanics.inline import InlineMechanicRenderer
from ironvault_publisher.transforms.icons import DEFAULT_ICONS, IconTable

# Rendered by page templates from frontmatter, not here.
PLACEHOLDER_LANGUAGES = (
    'iron-vault-track',
    'iron-vault-character-meters',
    'iron-vault-character-assets',
    'iron-vault-character-impacts',
    'iron-vault-character-special-tracks',
)


def create_markdown() -> MarkdownIt:
    """CommonMark with tables, strikethrough, task lists, footnotes and raw HTML."""
    return (
        MarkdownIt('commonmark', {'html': True})
        .enable(['table', 'strikethrough'])
        .use(tasklists_plugin)
        .use(footnote_plugin)
    )


@dataclass
class RenderContext:
    """Everything node renderers need for one build."""
    documents: Sequence[Document]
    link_index: LinkIndex
    base_url: str = ""
    icons: IconTable = DEFAULT_ICONS


def _html_block(html: str, source: Token) -> Token:
    token = Token('html_block', '', 0, content=html + '\n')
    token.map = source.map
    token.block = True
    return token


def _html_inline(html: str) -> Token:
    return Token('html_inline', '', 0, content=html)


class MarkdownRenderer:
    """Parses markdown and substitutes domain nodes with rendered HTML."""

    def __init__(self, context: RenderContext, md: Optional[MarkdownIt] = None):
        self.context = context
        self.md = md or create_markdown()
        self.inline = InlineMechanicRenderer(context.base_url, context.link_index, context.icons)
        self.blocks = BlockMechanicRenderer(context.base_url, context.link_index)
        self._fences: Dict[str, Callable[[str], str]] = {
            blocks.LANGUAGE: self.blocks.render,
            dataview.LANGUAGE: self._dataview,
        }
        for language in PLACEHOLDER_LANGUAGES:
            self._fences[language] = _placeholder(language)

    def _dataview(self, source: str) -> str:
        return dataview.render_query(source, self.context.documents, self.context.base_url)

    def render(self, text: str) -> str:
        """Render markdown text to HTML."""
        env: dict = {}
        tokens = self.substitute(self.md.parse(text, env))
        return self.md.renderer.render(tokens, self.md.options, env)

    def substitute(self, tokens: List[Token]) -> List[Token]:
        """Replace reserved fences and mechanic inline code with HTML tokens."""
        result = []
        for token in tokens:
            if token.type == 'fence':
                token.content = token.content.rstrip()
                language = token.info.strip().split(' ')[0] if token.info else ''
                render = self._fences.get(language)
                if render is not None:
                    token = _html_block(render(token.content), token)
            elif token.type == 'inline' and token.children:
                token.children = [self._inline_child(child) for child in token.children]
            result.append(token)
        return result

    def _inline_child(self, token: Token) -> Token:
        if token.type != 'code_inline' or not token.content.startswith(NAMESPACE):
            return token
        html = self.inline.render(token.content)
        return _html_inline(html) if html is not None else token


def _placeholder(language: str) -> Callable[[str], str]:
    def render(source: str) -> str:
        return f'<div class="{language}-placeholder"></div>'
    return render
