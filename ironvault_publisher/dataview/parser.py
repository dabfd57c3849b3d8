"""Line-oriented parser for the supported dataview subset.

One clause per line, keywords case-insensitive::

    TABLE WITHOUT ID file.link as "Name", status
    FROM "Characters"
    WHERE faction = [[Iron Syndicate]]
    SORT file.name ASC

Lines that are not understood are skipped rather than failing the query.
"""

import re
from typing import List, Optional

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

LANGUAGE = 'dataview'

ALIAS_PATTERN = re.compile(r'^(.+?)\s+as\s+"([^"]+)"$', re.IGNORECASE)
NEQ_PATTERN = re.compile(r'^(\S+?)\s*!=\s*(.+)$')
EQ_PATTERN = re.compile(r'^(\S+?)\s*=\s*(.+)$')
LITERAL_EDGES = re.compile(r'^["\'\[]+|["\'\]]+$')


def parse_query(text: str) -> Optional[DataviewQuery]:
    """Parse query text.

    Args:
        text: Body of a ``dataview`` code block

    Returns:
        DataviewQuery, or None if no TABLE/LIST line is present
    """
    query: Optional[DataviewQuery] = None
    from_clauses: List[FromClause] = []
    where_clauses: List[WhereClause] = []
    sort: Optional[SortClause] = None

    for raw in text.strip().split('\n'):
        line = raw.strip()
        if not line:
            continue
        keyword = line.upper()

        if _starts_with(keyword, 'TABLE WITHOUT ID'):
            query = DataviewQuery(ResultForm.TABLE, without_id=True,
                                  fields=parse_fields(line[len('TABLE WITHOUT ID'):]))
        elif _starts_with(keyword, 'TABLE'):
            query = DataviewQuery(ResultForm.TABLE, fields=parse_fields(line[len('TABLE'):]))
        elif _starts_with(keyword, 'LIST'):
            query = DataviewQuery(ResultForm.LIST, fields=parse_fields(line[len('LIST'):]))
        elif _starts_with(keyword, 'FROM'):
            selector = line[len('FROM'):].strip()
            if selector:
                from_clauses.append(FromClause(selector))
        elif _starts_with(keyword, 'WHERE'):
            clause = parse_where(line[len('WHERE'):].strip())
            if clause:
                where_clauses.append(clause)
        elif _starts_with(keyword, 'SORT'):
            sort = parse_sort(line[len('SORT'):].strip())

    if query is None:
        return None
    query.from_clauses = from_clauses
    query.where_clauses = where_clauses
    query.sort = sort
    return query


def _starts_with(upper_line: str, keyword: str) -> bool:
    """Keyword match on a word boundary, so ``TABLES`` is not ``TABLE``."""
    if not upper_line.startswith(keyword):
        return False
    rest = upper_line[len(keyword):]
    return not rest or rest[0].isspace()


def split_fields(fields_str: str) -> List[str]:
    """Split a field list on commas that are not inside double quotes."""
    parts: List[str] = []
    current = ''
    in_quote = False
    for ch in fields_str:
        if ch == '"':
            in_quote = not in_quote
        if ch == ',' and not in_quote:
            parts.append(current)
            current = ''
        else:
            current += ch
    parts.append(current)
    return [p.strip() for p in parts if p.strip()]


def parse_fields(fields_str: str) -> List[QueryField]:
    """Parse ``field as "Label", other`` into ordered fields."""
    fields = []
    for part in split_fields(fields_str):
        match = ALIAS_PATTERN.match(part)
        if match:
            fields.append(QueryField(match.group(1).strip(), match.group(2)))
        else:
            fields.append(QueryField(part, part))
    return fields


def strip_literal(value: str) -> str:
    """Remove surrounding quotes and wikilink brackets from a literal."""
    return LITERAL_EDGES.sub('', value.strip()).strip()


def parse_where(clause: str) -> Optional[WhereClause]:
    """Parse ``field = value`` or ``field != value``; None otherwise."""
    match = NEQ_PATTERN.match(clause)
    if match:
        return WhereClause(match.group(1), Operator.NEQ, strip_literal(match.group(2)))
    match = EQ_PATTERN.match(clause)
    if match:
        return WhereClause(match.group(1), Operator.EQ, strip_literal(match.group(2)))
    return None


def parse_sort(clause: str) -> Optional[SortClause]:
    """Parse ``field [ASC|DESC]``; anything but ASC sorts descending."""
    parts = clause.split()
    if not parts:
        return None
    direction = SortDirection.ASC if len(parts) > 1 and parts[1].upper() == 'ASC' else SortDirection.DESC
    return SortClause(parts[0], direction)
