"""Structured form of a dataview query."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ResultForm(Enum):
    """Type of dataview query."""

    TABLE = "TABLE"
    LIST = "LIST"


class SortDirection(Enum):
    """Sort direction for SORT clause."""

    ASC = "ASC"
    DESC = "DESC"


class Operator(Enum):
    EQ = "="
    NEQ = "!="


@dataclass(frozen=True)
class QueryField:
    """A column (or list annotation): source field and display label."""

    source: str
    label: str


@dataclass(frozen=True)
class FromClause:
    """Scope selector: ``#tag`` or a folder path."""

    selector: str

    @property
    def is_tag(self) -> bool:
        return self.selector.startswith('#')

    @property
    def tag(self) -> str:
        return self.selector[1:]

    @property
    def folder(self) -> str:
        return self.selector.strip('"\'')


@dataclass(frozen=True)
class WhereClause:
    field: str
    operator: Operator
    value: str


@dataclass(frozen=True)
class SortClause:
    field: str
    direction: SortDirection = SortDirection.DESC


@dataclass
class DataviewQuery:
    """Complete dataview query, in declared field order."""

    result_form: ResultForm
    without_id: bool = False
    fields: List[QueryField] = field(default_factory=list)
    from_clauses: List[FromClause] = field(default_factory=list)
    where_clauses: List[WhereClause] = field(default_factory=list)
    sort: Optional[SortClause] = None
