"""
Global Exception Handler for FastAPI Application.

This module provides a global exception handler that catches all unhandled
exceptions and logs detailed information including error ID, request context,
and full traceback for debugging purposes. It also wires every handler of this
package into the application.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from learninggrowth.chain.errors import ChainClientError, ChainValidationError
from learninggrowth.core.logging_config import get_logger

from .api_handlers import (
    chain_client_error_handler,
    chain_validation_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .http_error import HttpError, error_response, http_error_handler

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    The response carries the exception message so clients see what failed,
    plus an error ID that matches the log entry.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with the error envelope
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return error_response(
        500,
        str(exc) or "Unknown error.",
        {"errorId": error_id, "errorType": type(exc).__name__},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Starlette picks the handler registered for the closest class in the
    exception's MRO, so ``ChainValidationError`` wins over ``ChainClientError``.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(HttpError, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ChainValidationError, chain_validation_handler)
    app.add_exception_handler(ChainClientError, chain_client_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
