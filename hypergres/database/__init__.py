"""
Database providers
"""

from .adapters import Provider, PostgreSQLProvider, to_pyformat
from .factory import ProviderFactory

__all__ = [
    'Provider',
    'PostgreSQLProvider',
    'to_pyformat',
    'ProviderFactory'
]
