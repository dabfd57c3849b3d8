"""Evaluates parsed dataview queries against the document set."""

from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Sequence

from ironvault_publisher.core.models import Document
from ironvault_publisher.dataview.query import (
    DataviewQuery,
    FromClause,
    Operator,
    SortClause,
    SortDirection,
    WhereClause,
)
from ironvault_publisher.transforms.links import normalize_path


class FieldResolver:
    """Resolves field values from a document."""

    # Virtual fields that map to file metadata
    FILE_FIELDS: Dict[str, Callable[[Document], Any]] = {
        'file.link': lambda doc: doc.title,
        'file.name': lambda doc: doc.title,
        'file.path': lambda doc: normalize_path(doc.path),
        'file.folder': lambda doc: doc.folder,
        'file.mtime': lambda doc: 0,  # not tracked
    }

    @classmethod
    def resolve(cls, doc: Document, field: str) -> Any:
        """Resolve a field, unwrapping a wikilink-shaped string value.

        Returns:
            Field value or None if not present
        """
        if field in cls.FILE_FIELDS:
            return cls.FILE_FIELDS[field](doc)
        return unwrap_wikilink(doc.frontmatter.get(field))


def unwrap_wikilink(value: Any) -> Any:
    """Reduce ``"[[Target]]"`` to ``"Target"``; other values pass through."""
    if isinstance(value, str) and value.startswith('[[') and value.endswith(']]'):
        return value[2:-2]
    return value


def as_text(value: Any) -> str:
    """String form of a scalar, with booleans spelled as in YAML."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def matches_value(actual: Any, expected: str) -> bool:
    """Case-insensitive equality; lists match if any element matches."""
    if actual is None:
        return False
    if isinstance(actual, (list, tuple, set)):
        return any(matches_value(item, expected) for item in actual)
    clean_expected = unwrap_wikilink(expected)
    clean_actual = unwrap_wikilink(as_text(actual))
    return clean_actual.lower() == clean_expected.lower()


def in_scope(doc: Document, clause: FromClause) -> bool:
    """Apply one FROM selector.

    Tags match the ``tags`` frontmatter field exactly (case-sensitive);
    folders match the path prefix case-insensitively.
    """
    if clause.is_tag:
        tags = doc.frontmatter.get('tags') or []
        if isinstance(tags, (list, tuple)):
            return clause.tag in [str(t) for t in tags]
        return str(tags) == clause.tag

    folder = normalize_path(clause.folder).strip('/').lower()
    path = normalize_path(doc.path).lower()
    return path == folder or path.startswith(folder + '/')


def satisfies(doc: Document, clause: WhereClause) -> bool:
    matched = matches_value(FieldResolver.resolve(doc, clause.field), clause.value)
    return not matched if clause.operator is Operator.NEQ else matched


def _sort_key(value: Any):
    # Numbers before text; missing values last in ascending order.
    if value is None:
        return (2, '')
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, (list, tuple)):
        return (1, ', '.join(as_text(v) for v in value))
    return (1, as_text(value))


def _compare(a: Any, b: Any) -> int:
    key_a, key_b = _sort_key(a), _sort_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_documents(docs: List[Document], clause: SortClause) -> List[Document]:
    """Stable sort on the resolved field value."""
    direction = 1 if clause.direction is SortDirection.ASC else -1
    values = {id(doc): FieldResolver.resolve(doc, clause.field) for doc in docs}

    def compare(a: Document, b: Document) -> int:
        return direction * _compare(values[id(a)], values[id(b)])

    return sorted(docs, key=cmp_to_key(compare))


def execute_query(query: DataviewQuery, documents: Sequence[Document]) -> List[Document]:
    """Run a query: FROM, then WHERE, then SORT, whatever the text order.

    Args:
        query: Parsed query
        documents: Full document set (not modified)

    Returns:
        Matching documents in result order
    """
    results = list(documents)

    for from_clause in query.from_clauses:
        results = [doc for doc in results if in_scope(doc, from_clause)]

    for where_clause in query.where_clauses:
        results = [doc for doc in results if satisfies(doc, where_clause)]

    if query.sort:
        results = sort_documents(results, query.sort)

    return results
