"""
Hypergres: CRUD query compilation and schema discovery for PostgreSQL
"""

from .models import Source, Relationship, Column
from .errors import ErrorCode, HypergresError
from .config import Config, ProviderConfig, ConnectionOptions
from .core import Core

__version__ = '0.1.0'

__all__ = [
    'Source',
    'Relationship',
    'Column',
    'ErrorCode',
    'HypergresError',
    'Config',
    'ProviderConfig',
    'ConnectionOptions',
    'Core'
]
