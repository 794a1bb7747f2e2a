"""
Positional parameter binding for compiled statements
"""

from typing import List, Any, NamedTuple, Sequence


# Separates nesting path segments in join aliases. '/' can never appear in an
# unquoted PostgreSQL identifier, so multi-segment aliases are always quoted.
JOIN_MARKER = '/'


class Statement(NamedTuple):
    """SQL text with `$n` placeholders and the values they refer to"""
    text: str
    values: List[Any]


class Subselect:
    """A value that is emitted as SQL text rather than bound as a parameter"""

    def __init__(self, sql: str):
        self.sql = sql

    def __eq__(self, other):
        return isinstance(other, Subselect) and other.sql == self.sql

    def __repr__(self):
        return f"Subselect({self.sql!r})"


class Parameters:
    """Collects values in order and hands out their placeholders"""

    def __init__(self):
        self.values: List[Any] = []

    def add(self, value: Any) -> str:
        """Bind a single value"""
        self.values.append(value)
        return f"${len(self.values)}"

    def bind(self, value: Any) -> str:
        """Bind a value; a top-level list binds one placeholder per item"""
        if isinstance(value, list):
            return ', '.join(self.add(item) for item in value)
        return self.add(value)


def alias(path: Sequence[str]) -> str:
    """Alias used for a join (or its CTE) at a nesting path"""
    name = JOIN_MARKER.join(path)
    if len(path) > 1:
        return '"' + name.replace('"', '""') + '"'
    return name
