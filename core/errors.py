#!/usr/bin/env python3
"""
Service-layer exceptions shared by the scoring, recommendation and dashboard
services.

Every exception carries a stable ``code`` so callers (the HTTP adapter, the
rescore worker) can tell "not found" apart from "temporarily unavailable"
without inspecting messages.
"""

import contextlib
import logging

from sqlalchemy.exc import OperationalError, TimeoutError as SQLAlchemyTimeoutError

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    code = "INTERNAL_ERROR"
    retryable = False


class NotFoundError(ServiceException):
    """
    Raised when an employee or task is absent or belongs to another tenant.

    The two cases are deliberately indistinguishable to the caller.
    """
    code = "NOT_FOUND"


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee is not found in the tenant."""
    pass


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found in the tenant."""
    pass


class CacheUnavailableError(ServiceException):
    """Raised by cache backends; never surfaced past the cache-aside layer."""
    code = "CACHE_UNAVAILABLE"
    retryable = True


class MalformedHistoryError(ServiceException):
    """Raised when a persisted breakdown does not match any known record shape."""
    code = "MALFORMED_HISTORY"


class DependencyTimeoutError(ServiceException):
    """Raised when a downstream store exceeds its time budget."""
    code = "DEPENDENCY_TIMEOUT"
    retryable = True


@contextlib.contextmanager
def translate_dependency_errors(operation: str):
    """
    Re-raise store timeouts and dropped connections as DependencyTimeoutError.

    Usage:
        with translate_dependency_errors("load tasks"):
            tasks = repo.tasks.list_for_employee(org_id, employee_id)
    """
    try:
        yield
    except (SQLAlchemyTimeoutError, OperationalError) as e:
        logger.warning(f"Dependency failure during {operation}: {e}")
        raise DependencyTimeoutError(f"Timed out during {operation}") from e
