"""
JSON Schema generation from introspected columns
"""

import copy
import re
from typing import List, Dict, Any, Optional

from .config import DiscoveryOptions
from ..models import Column


SCHEMA_URI = 'http://json-schema.org/draft-04/schema#'

# Integers and decimals may be given as strings when `strict_numbers` is off,
# so 64-bit values survive consumers without full-width integers
TYPE_STRING_INTEGER = {'type': 'string', 'pattern': r'^\d+$'}
TYPE_STRING_DECIMAL = {'type': 'string', 'pattern': r'^\d+(\.\d+)?$'}
TYPE_NUMBER = {'type': 'number'}

TYPE_DATE_TIME = {'type': 'string', 'format': 'date-time'}

BASE_TYPES: Dict[str, Dict[str, Any]] = {
    'boolean': {'type': 'boolean'},
    'character': {'type': 'string'},
    'character varying': {'type': 'string'},
    'text': {'type': 'string'},
    'json': {'type': 'object'},
    'jsonb': {'type': 'object'},
    'date': TYPE_DATE_TIME,
    'time without time zone': TYPE_DATE_TIME,
    'time with time zone': TYPE_DATE_TIME,
    'timestamp without time zone': TYPE_DATE_TIME,
    'timestamp with time zone': TYPE_DATE_TIME,
    'interval': {
        'type': 'object',
        'format': 'interval',
        'minProperties': 1,
        'additionalProperties': False,
        'properties': {
            'milliseconds': {'type': 'number'},
            'seconds': {'type': 'number'},
            'minutes': {'type': 'number'},
            'hours': {'type': 'number'},
            'days': {'type': 'number'},
            'months': {'type': 'number'},
            'years': {'type': 'number'}
        }
    }
}

INTEGER_TYPES = ('smallint', 'integer', 'bigint', 'smallserial', 'serial', 'bigserial')
DECIMAL_TYPES = ('numeric', 'decimal', 'real', 'double precision')

# Recognizes `(<col> = ANY (ARRAY[<literal>, ...]))`, as PostgreSQL prints
# CHECK constraints that were written as `<col> IN (...)`
ENUM_CHECK_REGEX = re.compile(r'^\(.* = ANY \(ARRAY\[(.*)\]\)\)')

# Finds each quoted literal, such as `'good'::text`, in the captured list
ENUM_EXTRACT_VALUE_REGEX = re.compile(r"'((?:[^']|'')*)'")

SEQUENCE_DEFAULT_PREFIX = 'nextval'


def schema(title: str, columns: List[Column], options: Optional[DiscoveryOptions] = None) -> Dict[str, Any]:
    """Generate a JSON Schema document describing a table or view"""
    return {
        '$schema': SCHEMA_URI,
        'title': title,
        'type': 'object',
        'properties': properties(columns, options),
        'required': required(columns)
    }


def properties(columns: List[Column], options: Optional[DiscoveryOptions] = None) -> Dict[str, Dict[str, Any]]:
    """JSON Schema property definitions keyed by column name"""
    result = {}
    for column in columns:
        result.update(property_(column, options))
    return result


def property_(column: Column, options: Optional[DiscoveryOptions] = None) -> Dict[str, Dict[str, Any]]:
    """Type and other attributes of a single column"""
    attributes = {}
    attributes.update(column_type(column, options))
    attributes.update(is_read_only(column))
    attributes.update(is_enum_constraint(column))
    return {column.name: attributes}


def column_type(column: Column, options: Optional[DiscoveryOptions] = None) -> Dict[str, Any]:
    """
    Express the PostgreSQL type of a column using JSON Schema types.

    Numeric columns are a plain `number` when `options.strict_numbers` is set,
    otherwise either a number or a string of digits. Unknown types accept any
    value.
    """
    strict = options is not None and options.strict_numbers

    if column.type in INTEGER_TYPES:
        return dict(TYPE_NUMBER) if strict else {'oneOf': [dict(TYPE_NUMBER), dict(TYPE_STRING_INTEGER)]}

    if column.type in DECIMAL_TYPES:
        return dict(TYPE_NUMBER) if strict else {'oneOf': [dict(TYPE_NUMBER), dict(TYPE_STRING_DECIMAL)]}

    base = BASE_TYPES.get(column.type)
    if base is None:
        return {}

    # Copied so that documents never share nested dicts
    return copy.deepcopy(base)


def is_read_only(column: Column) -> Dict[str, bool]:
    """`{'readOnly': True}` for primary keys whose value comes from a sequence"""
    read_only = (
        column.is_primary_key
        and column.nullable is False
        and isinstance(column.default, str)
        and column.default.startswith(SEQUENCE_DEFAULT_PREFIX)
    )
    return {'readOnly': True} if read_only else {}


def is_enum_constraint(column: Column) -> Dict[str, List[str]]:
    """`{'enum': [...]}` when the column's CHECK constraints restrict it to a list of literals"""
    values: List[str] = []

    for constraint in column.constraints:
        if not constraint:
            continue

        match = ENUM_CHECK_REGEX.match(constraint)
        if not match or not match.group(1):
            continue

        for literal in ENUM_EXTRACT_VALUE_REGEX.finditer(match.group(1)):
            value = literal.group(1).replace("''", "'")
            if value not in values:
                values.append(value)

    return {'enum': values} if values else {}


def is_required(column: Column) -> bool:
    """A value must be given explicitly for non-nullable columns without a default"""
    return column.nullable is False and column.default is None


def required(columns: List[Column]) -> List[str]:
    """Names of the columns that require an explicit value"""
    return [column.name for column in columns if is_required(column)]
