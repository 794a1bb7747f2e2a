"""
Query descriptions consumed by the query builders

These shapes are generic to any Provider: they name Sources, properties and
values, never SQL syntax (except through Raw fragments).
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence, Union

from ..models import Source


@dataclass(frozen=True)
class Raw:
    """A Provider-specific fragment, e.g. SQL text with `?` value markers"""
    fragment: str
    values: Optional[Any] = None


@dataclass(frozen=True)
class Term:
    """Compares a named property to a value"""
    field: str
    value: Any
    operator: str = '='


@dataclass(frozen=True)
class And:
    """Combines Conditions with AND"""
    conditions: Sequence['Condition']


@dataclass(frozen=True)
class Or:
    """Combines Conditions with OR"""
    conditions: Sequence['Condition']


Condition = Union[And, Or, Raw, Term]

Field = Union[str, Raw]


@dataclass(frozen=True)
class Join:
    """Embeds or filters through a related Source at a nesting path"""
    source: str
    path: Sequence[str]
    from_: str
    to: str


@dataclass(frozen=True)
class Order:
    """Ordering of items in a collection"""
    field: str
    direction: str = 'asc'


@dataclass(frozen=True)
class Page:
    """Pagination of a collection; `number` starts at 1"""
    size: int
    number: int = 1

    @property
    def offset(self) -> int:
        return self.size * (self.number - 1)


@dataclass
class Query:
    """Operation against a single Source"""
    source: Source


@dataclass
class Create(Query):
    data: Dict[str, Any] = field(default_factory=dict)
    returning: List[str] = field(default_factory=list)
    schema: Optional[Dict[str, Any]] = None
    joins: Optional[List[Join]] = None


@dataclass
class Read(Query):
    fields: Optional[List[Field]] = None
    conditions: Optional[List[Condition]] = None
    schema: Optional[Dict[str, Any]] = None
    joins: Optional[List[Join]] = None
    order: Optional[List[Order]] = None
    page: Optional[Page] = None


@dataclass
class Update(Query):
    data: Dict[str, Any] = field(default_factory=dict)
    returning: List[str] = field(default_factory=list)
    conditions: Optional[List[Condition]] = None
    schema: Optional[Dict[str, Any]] = None
    joins: Optional[List[Join]] = None


@dataclass
class Delete(Query):
    conditions: Optional[List[Condition]] = None
