#!/usr/bin/env python3
"""
Error handlers for the web application.

Every error body carries a stable ``code`` so clients can tell "not found"
from "temporarily unavailable" without parsing messages.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.errors import (
    ServiceException,
    NotFoundError,
    DependencyTimeoutError
)

logger = logging.getLogger(__name__)


def _error_body(error: str, code: str, retryable: bool = False, error_type: str = "ServiceException") -> dict:
    return {
        "success": False,
        "error": error,
        "code": code,
        "retryable": retryable,
        "type": error_type
    }


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    if isinstance(exc, NotFoundError):
        status_code = 404
        logger.info(f"Not found in {request.url.path}: {exc}")
    elif isinstance(exc, DependencyTimeoutError):
        status_code = 503
        logger.warning(f"Dependency timeout in {request.url.path}: {exc}")
    else:
        status_code = 500
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content=_error_body(str(exc), exc.code, exc.retryable, exc.__class__.__name__)
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, "HTTP_ERROR", error_type="HTTPException")
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "INTERNAL_ERROR", error_type="InternalError")
    )
