"""
Compiles Condition trees into SQL boolean expressions
"""

from typing import Any, List

from ..models import Source
from ..errors import QueryError
from .models import And, Or, Raw, Term, Condition
from .params import Parameters


def compile_condition(source: Source, condition: Condition, params: Parameters) -> str:
    """Compile a Condition into a boolean expression, binding its values into `params`"""
    if isinstance(condition, And):
        return _group(source, condition.conditions, ' AND ', 'TRUE', params)

    if isinstance(condition, Or):
        return _group(source, condition.conditions, ' OR ', 'FALSE', params)

    if isinstance(condition, Raw):
        return compile_raw(condition, params)

    if isinstance(condition, Term):
        if isinstance(condition.value, list) and not condition.value:
            raise QueryError(f"Condition on '{condition.field}' has an empty list of values")
        placeholder = params.bind(condition.value)
        if isinstance(condition.value, list):
            placeholder = f"({placeholder})"
        return f"{source.name}.{condition.field} {condition.operator} {placeholder}"

    raise QueryError(f"Unsupported condition: {condition!r}")


def _group(source: Source, conditions, separator: str, empty: str, params: Parameters) -> str:
    if not conditions:
        return empty

    return separator.join(
        f"({compile_condition(source, child, params)})" for child in conditions
    )


def compile_raw(raw: Raw, params: Parameters) -> str:
    """
    Substitute each `?` marker in a Raw fragment with the next bound value.

    A fragment without values is used verbatim, so `?` may appear in it as an
    operator or inside literals.
    """
    if raw.values is None:
        return raw.fragment

    values = _raw_values(raw.values)
    parts = raw.fragment.split('?')

    if len(parts) - 1 != len(values):
        raise QueryError(
            f"Raw fragment {raw.fragment!r} has {len(parts) - 1} markers but {len(values)} values"
        )

    text = parts[0]
    for value, part in zip(values, parts[1:]):
        text += params.bind(value) + part

    return text


def _raw_values(values: Any) -> List[Any]:
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]
