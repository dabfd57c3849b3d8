"""HTML rendering of dataview results, styled like Obsidian's dataview."""

from typing import Any, Sequence

from ironvault_publisher.core.models import Document
from ironvault_publisher.dataview.executor import FieldResolver, as_text
from ironvault_publisher.dataview.query import DataviewQuery, QueryField, ResultForm
from ironvault_publisher.transforms.links import escape_html, html_anchor

LINK_FIELD = 'file.link'

PARSE_ERROR_HTML = '<div class="dataview-error">Could not parse query</div>'


def format_value(value: Any) -> str:
    """Escaped display text for a frontmatter value."""
    if value is None:
        return ''
    if isinstance(value, str) and value.startswith('[[') and value.endswith(']]'):
        return escape_html(value[2:-2])
    if isinstance(value, (list, tuple)):
        return ', '.join(format_value(v) for v in value)
    return escape_html(as_text(value))


class ResultRenderer:
    """Formats query results as HTML tables and lists."""

    def __init__(self, base_url: str = ""):
        self.link = html_anchor(base_url)

    def render(self, query: DataviewQuery, results: Sequence[Document]) -> str:
        """Render results, or the empty-state box when there are none."""
        if not results:
            content = (
                '<div class="dataview-error-box">'
                '<p class="dataview-error-message">'
                f'Dataview: No results to show for {query.result_form.value.lower()} query.'
                '</p></div>'
            )
        elif query.result_form is ResultForm.LIST:
            content = self.render_list(query, results)
        else:
            content = self.render_table(query, results)
        return f'<div class="block-language-dataview">{content}</div>'

    def cell(self, doc: Document, field: QueryField) -> str:
        if field.source == LINK_FIELD:
            return self.link(doc.title, doc.slug)
        return format_value(FieldResolver.resolve(doc, field.source))

    def render_table(self, query: DataviewQuery, results: Sequence[Document]) -> str:
        header = ''.join(f'<th>{escape_html(c.label)}</th>' for c in query.fields)
        rows = ''.join(
            '<tr>' + ''.join(f'<td>{self.cell(doc, c)}</td>' for c in query.fields) + '</tr>'
            for doc in results
        )
        return (
            f'<table class="table-view-table">'
            f'<thead><tr>{header}</tr></thead>'
            f'<tbody>{rows}</tbody>'
            f'</table>'
        )

    def render_list(self, query: DataviewQuery, results: Sequence[Document]) -> str:
        items = []
        for doc in results:
            item = self.link(doc.title, doc.slug)
            if query.fields:
                item += f': {self.cell(doc, query.fields[0])}'
            items.append(f'<li class="dataview-result-list-li">{item}</li>')
        return f'<ul class="dataview-result-list-root-ul">{"".join(items)}</ul>'
