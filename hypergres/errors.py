"""
Application-wide error types and error codes
"""

import logging
from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Numeric error codes, also used as process exit codes"""
    CONFIG_VERSION_MISSING = 1
    CONFIG_VALIDATION_FAILED = 2
    DISCOVERY_SCOPE_INVALID = 3
    DISCOVERY_FAILED = 4
    CORE_NOT_CONFIGURED = 5
    CORE_NO_PROVIDERS = 6
    PROVIDER_DRIVER_NOT_FOUND = 7
    QUERY_INVALID = 8


class HypergresError(Exception):
    """Base error carrying an error code, a readable message and the original error"""

    code = ErrorCode.CONFIG_VALIDATION_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None, err: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.err = err


class ConfigError(HypergresError):
    """Raised when a configuration mapping is missing or malformed"""
    code = ErrorCode.CONFIG_VALIDATION_FAILED


class ScopeError(ConfigError):
    """Raised for a discovery Scope value that cannot be evaluated"""
    code = ErrorCode.DISCOVERY_SCOPE_INVALID


class DiscoveryError(HypergresError):
    """Raised when any part of a discovery pass fails"""
    code = ErrorCode.DISCOVERY_FAILED


class CoreError(HypergresError):
    """Raised when the Core is used before it has been configured"""
    code = ErrorCode.CORE_NOT_CONFIGURED


class ProviderNotFoundError(HypergresError):
    """Raised when no Provider implementation exists for a driver name"""
    code = ErrorCode.PROVIDER_DRIVER_NOT_FOUND


class QueryError(HypergresError):
    """Raised when a Query cannot be compiled"""
    code = ErrorCode.QUERY_INVALID


def handle_error(err: BaseException, log: Optional[logging.Logger] = None) -> int:
    """Log an error and return the exit code that should be used for it"""
    log = log or logging.getLogger("hypergres")

    if not isinstance(err, HypergresError):
        log.error("Unexpected error: %s", err, exc_info=err)
        return 1

    if err.err is not None:
        log.error("%s (%s)", err.message, err.err)
    else:
        log.error(err.message)

    return int(err.code)
