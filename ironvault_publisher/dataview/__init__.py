"""Dataview query support: parse, execute and render to HTML."""

from typing import Sequence

from loguru import logger

from ironvault_publisher.core.models import Document
from ironvault_publisher.dataview.executor import FieldResolver, execute_query
from ironvault_publisher.dataview.parser import LANGUAGE, parse_query
from ironvault_publisher.dataview.query import (
    DataviewQuery,
    FromClause,
    Operator,
    QueryField,
    ResultForm,
    SortClause,
    SortDirection,
    WhereClause,
)
from ironvault_publisher.dataview.render import PARSE_ERROR_HTML, ResultRenderer


def render_query(text: str, documents: Sequence[Document], base_url: str = "") -> str:
    """Parse, execute and render one query block."""
    query = parse_query(text)
    if query is None:
        logger.debug(f"Could not parse dataview query: {text.strip()!r}")
        return PARSE_ERROR_HTML
    return ResultRenderer(base_url).render(query, execute_query(query, documents))


__all__ = [
    "LANGUAGE",
    "DataviewQuery",
    "FieldResolver",
    "FromClause",
    "Operator",
    "QueryField",
    "ResultForm",
    "ResultRenderer",
    "SortClause",
    "SortDirection",
    "WhereClause",
    "execute_query",
    "parse_query",
    "render_query",
]
