"""
Query builders that compile Query descriptions into parameterized SQL

Every builder is a pure function of its Query: no I/O, no shared state.
"""

import copy
from collections.abc import Mapping
from typing import List, Dict, Any, Optional, Sequence, Tuple

from ..errors import QueryError
from .conditions import compile_condition, compile_raw
from .models import Create, Read, Update, Delete, Join, Raw
from .params import Parameters, Statement, Subselect, alias


def compile_create(q: Create) -> Statement:
    """Creates an `INSERT...` statement"""
    params = Parameters()

    ctes, data = _join_ctes(q.joins, q.data, params)
    columns, values = _assignments(data, params)

    text = _with_clause(ctes)
    if columns:
        text += f"INSERT INTO {q.source.name} ({', '.join(columns)}) VALUES ({', '.join(values)})"
    else:
        text += f"INSERT INTO {q.source.name} DEFAULT VALUES"
    text += _returning(q.returning)

    return Statement(text, params.values)


def compile_read(q: Read) -> Statement:
    """Creates a `SELECT...` statement"""
    params = Parameters()

    fields = _fields(q, params)
    joins, embedded = _joins(q, counting=False)

    text = f"SELECT {', '.join(fields + embedded)} FROM {q.source.name}{joins}"
    text += _where(q, params)
    text += _order(q)
    text += _pagination(q)

    return Statement(text, params.values)


def compile_update(q: Update) -> Statement:
    """Creates an `UPDATE...` statement"""
    params = Parameters()

    ctes, data = _join_ctes(q.joins, q.data, params)
    columns, values = _assignments(data, params)

    if not columns:
        raise QueryError(f"An update of '{q.source.name}' requires at least one value")

    assignments = ', '.join(f"{column} = {value}" for column, value in zip(columns, values))

    text = _with_clause(ctes)
    text += f"UPDATE {q.source.name} SET {assignments}"
    text += _where(q, params)
    text += _returning(q.returning)

    return Statement(text, params.values)


def compile_delete(q: Delete) -> Statement:
    """Creates a `DELETE...` statement"""
    params = Parameters()

    text = f"DELETE FROM {q.source.name}"
    text += _where(q, params)

    return Statement(text, params.values)


def compile_count(q: Read) -> Statement:
    """Creates a `SELECT COUNT(*)...` statement"""
    params = Parameters()

    joins, _ = _joins(q, counting=True)

    text = f"SELECT COUNT(*) FROM {q.source.name}{joins}"
    text += _where(q, params)

    return Statement(text, params.values)


def _join_ctes(joins: Optional[List[Join]], data: Dict[str, Any],
               params: Parameters) -> Tuple[List[Tuple[str, str]], Dict[str, Any]]:
    """
    Turns nested objects found at join paths into CTEs that insert them.

    Returns the CTEs as (alias, statement) pairs in emission order, and a copy
    of `data` where each nested object is replaced by a sub-select of the new
    row's key. Deeper joins are emitted first so that a parent's CTE can
    select from the CTEs of its own nested objects.
    """
    if not joins:
        return [], data

    transformed = copy.deepcopy(dict(data))
    ctes = []

    for join in _sorted_by_depth(joins, reverse=True):
        nested = _get_path(transformed, join.path)

        # Scalars are foreign keys that are already known
        if not isinstance(nested, Mapping):
            continue

        name = alias(join.path)
        columns, values = _assignments(nested, params)
        if columns:
            insert = f"INSERT INTO {join.source} ({', '.join(columns)}) VALUES ({', '.join(values)})"
        else:
            insert = f"INSERT INTO {join.source} DEFAULT VALUES"
        ctes.append((name, f"{insert} RETURNING {join.to}"))

        _set_path(transformed, join.path, Subselect(f"(SELECT {join.to} FROM {name})"))

    return ctes, transformed


def _sorted_by_depth(joins: Sequence[Join], reverse: bool = False) -> List[Join]:
    return sorted(joins, key=lambda j: len(j.path), reverse=reverse)


def _get_path(data: Any, path: Sequence[str]) -> Any:
    current = data
    for segment in path:
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


def _set_path(data: Dict[str, Any], path: Sequence[str], value: Any):
    current = data
    for segment in path[:-1]:
        current = current[segment]
    current[path[-1]] = value


def _assignments(data: Mapping, params: Parameters) -> Tuple[List[str], List[str]]:
    """Column names and value placeholders for INSERT and UPDATE statements"""
    columns = []
    values = []

    for column, value in data.items():
        columns.append(column)
        if isinstance(value, Subselect):
            values.append(value.sql)
        else:
            # Lists are wrapped so the binder keeps them as a single value
            values.append(params.bind([value] if isinstance(value, list) else value))

    return columns, values


def _with_clause(ctes: List[Tuple[str, str]]) -> str:
    if not ctes:
        return ''
    return 'WITH ' + ', '.join(f"{name} AS ({statement})" for name, statement in ctes) + ' '


def _returning(returning: Optional[List[str]]) -> str:
    if not returning:
        return ''
    return f" RETURNING {','.join(returning)}"


def _fields(q: Read, params: Parameters) -> List[str]:
    """SELECT columns; plain names are qualified, Raw fragments are used verbatim"""
    if not q.fields:
        return [f"{q.source.name}.*"]

    fields = []
    for field in q.fields:
        if isinstance(field, Raw):
            fields.append(compile_raw(field, params))
        else:
            fields.append(f"{q.source.name}.{field}")
    return fields


def _joins(q: Read, counting: bool) -> Tuple[str, List[str]]:
    """
    LEFT JOIN clauses for a Read query, parents before their nested joins.

    Unless the query is used for counting, every joined row is also embedded
    as a single JSON object column named after the join alias.
    """
    if not q.joins:
        return '', []

    text = ''
    embedded = []

    for join in _sorted_by_depth(q.joins):
        name = alias(join.path)
        parent = alias(join.path[:-1]) if len(join.path) > 1 else q.source.name

        text += f" LEFT JOIN {join.source} AS {name} ON ({name}.{join.to} = {parent}.{join.from_})"

        if counting:
            continue

        embedded.append(f"row_to_json({name}.*) AS {name}")

    return text, embedded


def _where(q, params: Parameters) -> str:
    """WHERE clause; each top-level condition is ANDed as its own group"""
    if not q.conditions:
        return ''

    terms = [f"({compile_condition(q.source, condition, params)})" for condition in q.conditions]
    return ' WHERE ' + ' AND '.join(terms)


def _order(q: Read) -> str:
    if not q.order:
        return ''

    terms = [
        f"{order.field} {'ASC' if order.direction.lower() == 'asc' else 'DESC'}"
        for order in q.order
    ]
    return ' ORDER BY ' + ', '.join(terms)


def _pagination(q: Read) -> str:
    if not q.page:
        return ''

    if q.page.number < 1 or q.page.size < 0:
        raise QueryError(f"Invalid page: size={q.page.size}, number={q.page.number}")

    return f" LIMIT {int(q.page.size)} OFFSET {int(q.page.offset)}"
