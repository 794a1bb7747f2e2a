"""
Discovery scopes: rules that include or exclude schemas, tables and views by name
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Tuple

from sqlalchemy import column, false, true
from sqlalchemy.sql.elements import ColumnElement

from ..errors import ScopeError


class Scope(ABC):
    """Base class for discovery scopes"""

    @abstractmethod
    def matches(self, name: str) -> bool:
        """Whether an entity name falls within this scope"""
        pass

    @abstractmethod
    def clause(self, field: str) -> ColumnElement:
        """SQL expression testing `field` against this scope"""
        pass


class All(Scope):
    """Every entity is in scope"""

    def matches(self, name: str) -> bool:
        return True

    def clause(self, field: str) -> ColumnElement:
        return true()

    def __eq__(self, other):
        return isinstance(other, All)

    def __repr__(self):
        return 'All()'


class Only(Scope):
    """Only the listed entities are in scope"""

    def __init__(self, names: Iterable[str]):
        self.names: Tuple[str, ...] = tuple(names)

    def matches(self, name: str) -> bool:
        return name in self.names

    def clause(self, field: str) -> ColumnElement:
        return column(field).in_(self.names)

    def __eq__(self, other):
        return isinstance(other, Only) and other.names == self.names

    def __repr__(self):
        return f"Only({list(self.names)!r})"


class Except(Scope):
    """Every entity except the listed ones is in scope"""

    def __init__(self, names: Iterable[str]):
        self.names: Tuple[str, ...] = tuple(names)

    def matches(self, name: str) -> bool:
        return name not in self.names

    def clause(self, field: str) -> ColumnElement:
        return column(field).not_in(self.names)

    def __eq__(self, other):
        return isinstance(other, Except) and other.names == self.names

    def __repr__(self):
        return f"Except({list(self.names)!r})"


def parse_scope(value: Any) -> Optional[Scope]:
    """
    Parse a scope from its configuration form:

    - `True` includes everything
    - `{'only': [names]}` includes the listed names
    - `{'except': [names]}` includes everything but the listed names
    - `None` or `False` leaves the scope absent, which includes nothing
    """
    if value is None or value is False:
        return None

    if value is True:
        return All()

    if isinstance(value, Scope):
        return value

    if isinstance(value, Mapping) and len(value) == 1:
        if 'only' in value and _is_name_list(value['only']):
            return Only(value['only'])
        if 'except' in value and _is_name_list(value['except']):
            return Except(value['except'])

    # A bare list is shorthand for `only`
    if _is_name_list(value):
        return Only(value)

    raise ScopeError(f"Invalid discovery scope: {value!r}")


def _is_name_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


def matches(scope: Optional[Scope], name: str) -> bool:
    """Evaluate a possibly absent scope against a name"""
    if scope is None:
        return False
    if not isinstance(scope, Scope):
        raise ScopeError(f"Invalid discovery scope: {scope!r}")
    return scope.matches(name)


def scope_clause(field: str, scope: Optional[Scope]) -> ColumnElement:
    """SQL expression for a possibly absent scope"""
    if scope is None:
        return false()
    if not isinstance(scope, Scope):
        raise ScopeError(f"Invalid discovery scope: {scope!r}")
    return scope.clause(field)
