"""
Discovery of tables and views, and JSON Schema synthesis for them
"""

from .scope import Scope, All, Only, Except, parse_scope
from .config import DiscoveryConfig, DiscoveryOptions, DEFAULT_ACTIONS
from .schema import schema
from .inspector import inspect, conditions, QUERIES

__all__ = [
    'Scope',
    'All',
    'Only',
    'Except',
    'parse_scope',
    'DiscoveryConfig',
    'DiscoveryOptions',
    'DEFAULT_ACTIONS',
    'schema',
    'inspect',
    'conditions',
    'QUERIES'
]
