"""
Query descriptions and the builders that compile them to SQL
"""

from .models import (
    Query, Create, Read, Update, Delete,
    And, Or, Raw, Term, Condition, Field,
    Join, Order, Page
)
from .params import Statement, Parameters, JOIN_MARKER
from .conditions import compile_condition
from .builders import compile_create, compile_read, compile_update, compile_delete, compile_count

__all__ = [
    'Query',
    'Create',
    'Read',
    'Update',
    'Delete',
    'And',
    'Or',
    'Raw',
    'Term',
    'Condition',
    'Field',
    'Join',
    'Order',
    'Page',
    'Statement',
    'Parameters',
    'JOIN_MARKER',
    'compile_condition',
    'compile_create',
    'compile_read',
    'compile_update',
    'compile_delete',
    'compile_count'
]
