#!/usr/bin/env python3
"""
Error handlers shared by every FastAPI app.

All error bodies have the shape `{"error": <message>, "details"?: <string>}`.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import ServiceException

logger = logging.getLogger(__name__)


def error_body(message: str, details: Optional[str] = None) -> dict:
    body = {"error": message}
    if details:
        body["details"] = details
    return body


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    The status code comes from the exception class.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.method} {request.url.path}: {exc.message} ({exc.details})")
    else:
        logger.info(f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details)
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with a consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and query parameters are 400, not 422."""
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", _first_validation_message(exc))
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions without leaking internals."""
    logger.exception(f"Unexpected error in {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error")
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
