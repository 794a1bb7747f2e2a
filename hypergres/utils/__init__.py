"""
Utility modules for logging and relationship analysis
"""

from .logger import setup_logger, attach_query_logging
from .schema_analyzer import SchemaAnalyzer

__all__ = [
    'setup_logger',
    'attach_query_logging',
    'SchemaAnalyzer'
]
