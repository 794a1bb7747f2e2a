"""
Logging setup and SQL query logging
"""

import logging
import time
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

QUERY_LOGGER = 'hypergres.postgresql'


def setup_logger(name: str = 'hypergres', level: Optional[int] = None) -> logging.Logger:
    """Setup logging; the level defaults to INFO the first time a logger is set up"""
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)

    if not logger.handlers:
        if level is None:
            logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def attach_query_logging(engine: Engine, provider_id: str) -> logging.Logger:
    """Log connections, statements, their durations and errors for an engine"""
    logger = logging.getLogger(QUERY_LOGGER)

    @event.listens_for(engine, 'connect')
    def on_connect(dbapi_connection, connection_record):
        logger.debug(f"[{provider_id}] Connected")

    @event.listens_for(engine, 'before_cursor_execute')
    def before_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.perf_counter())
        logger.debug(f"[{provider_id}] {statement}")

    @event.listens_for(engine, 'after_cursor_execute')
    def after_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info['query_start_time'].pop(-1)
        logger.debug(f"[{provider_id}] Query took {(time.perf_counter() - started) * 1000:.1f} ms")

    @event.listens_for(engine, 'handle_error')
    def on_error(exception_context):
        stack = exception_context.connection.info.get('query_start_time') if exception_context.connection else None
        if stack:
            stack.pop(-1)
        logger.error(f"[{provider_id}] Query failed: {exception_context.original_exception}")

    return logger
