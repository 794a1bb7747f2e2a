"""
Providers that execute compiled queries against a database
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Dict, Any, Callable, Optional, Tuple, TypeVar

from psycopg2.extras import Json
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from ..config import ProviderConfig, provider_log_props
from ..discovery import inspect
from ..models import Source
from ..query import (
    Create, Read, Update, Delete, Statement,
    compile_create, compile_read, compile_update, compile_delete, compile_count
)
from ..utils.logger import attach_query_logging


logger = logging.getLogger(__name__)

T = TypeVar('T')

PLACEHOLDER_REGEX = re.compile(r'\$(\d+)')


class Provider(ABC):
    """Abstract base class for data providers"""

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    def with_context(self, callback: Callable[[Any], T]) -> T:
        """Run `callback` with a database context, released afterwards"""
        pass

    @abstractmethod
    def create(self, context: Any, query: Create) -> List[Dict[str, Any]]:
        """Create items, returning the requested properties of each"""
        pass

    @abstractmethod
    def read(self, context: Any, query: Read) -> List[Dict[str, Any]]:
        """Read items"""
        pass

    @abstractmethod
    def update(self, context: Any, query: Update) -> List[Dict[str, Any]]:
        """Update items, returning the requested properties of each"""
        pass

    @abstractmethod
    def delete(self, context: Any, query: Delete) -> int:
        """Delete items, returning how many were deleted"""
        pass

    @abstractmethod
    def count(self, context: Any, query: Read) -> int:
        """Count the items a Read query would return"""
        pass

    @abstractmethod
    def discover(self, context: Any) -> List[Source]:
        """Discover the Sources this provider exposes"""
        pass


class PostgreSQLProvider(Provider):
    """PostgreSQL provider"""

    def __init__(self, config: ProviderConfig, engine: Optional[Engine] = None):
        super().__init__(config)
        self.engine = engine if engine is not None else create_engine(config.options.url(), pool_pre_ping=True)
        attach_query_logging(self.engine, config.id)
        logger.info(f"Created provider {provider_log_props(config)}")

    def with_context(self, callback: Callable[[Connection], T]) -> T:
        """
        Run `callback` with a connection inside a transaction.

        The transaction commits when the callback returns and rolls back when
        it raises; the connection goes back to the pool either way.
        """
        with self.engine.begin() as connection:
            return callback(connection)

    def create(self, context: Connection, query: Create) -> List[Dict[str, Any]]:
        return self._rows(self._execute(context, compile_create(query)))

    def read(self, context: Connection, query: Read) -> List[Dict[str, Any]]:
        return self._rows(self._execute(context, compile_read(query)))

    def update(self, context: Connection, query: Update) -> List[Dict[str, Any]]:
        return self._rows(self._execute(context, compile_update(query)))

    def delete(self, context: Connection, query: Delete) -> int:
        return self._execute(context, compile_delete(query)).rowcount

    def count(self, context: Connection, query: Read) -> int:
        return int(self._execute(context, compile_count(query)).scalar_one())

    def discover(self, context: Connection) -> List[Source]:
        return inspect(context, self.config.discovery)

    def _execute(self, context: Connection, statement: Statement):
        sql, params = to_pyformat(statement)
        if params is None:
            # No values: the text goes to the driver untouched
            return context.exec_driver_sql(sql, execution_options={'no_parameters': True})
        return context.exec_driver_sql(sql, params)

    @staticmethod
    def _rows(result) -> List[Dict[str, Any]]:
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings().all()]


def to_pyformat(statement: Statement) -> Tuple[str, Optional[Dict[str, Any]]]:
    """
    Convert `$n` placeholders to psycopg2's `%(pn)s` style.

    Literal `%` signs are escaped; dict values are adapted to JSON.
    Returns `(text, None)` when the statement has no values.
    """
    if not statement.values:
        return statement.text, None

    sql = PLACEHOLDER_REGEX.sub(
        lambda match: f"%(p{match.group(1)})s",
        statement.text.replace('%', '%%')
    )
    params = {f"p{index}": _adapt(value) for index, value in enumerate(statement.values, 1)}
    return sql, params


def _adapt(value: Any) -> Any:
    if isinstance(value, dict):
        return Json(value)
    return value
