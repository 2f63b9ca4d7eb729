"""
Handlers for request validation, contract client and routing errors.

Pydantic validation errors are reworded into the short messages clients
already rely on (``The field startTime is required.``) with the raw error
list attached as ``details``.
"""

from typing import Any, Dict, List, Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from learninggrowth.chain.errors import ChainClientError, ChainValidationError
from learninggrowth.core.logging_config import get_logger

from .http_error import error_response

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Resource not found."

_REQUIRED_ERROR_TYPES = {"missing", "required", "string_type", "string_too_short"}
_REQUEST_SECTIONS = {"body", "path", "query", "header", "cookie"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc if str(part) not in _REQUEST_SECTIONS]
    return ".".join(parts)


def describe_validation_error(error: Dict[str, Any]) -> str:
    """Turn one pydantic error entry into a client-facing sentence."""
    field = _field_name(error.get("loc", ()))
    if not field:
        return "The request body is required."
    error_type = error.get("type", "")
    if error_type in _REQUIRED_ERROR_TYPES:
        return f"The field {field} is required."
    if error_type == "boolean_value":
        return f"The field {field} must be a boolean value."
    return f"The field {field} is invalid."


def _details(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # ctx may hold exception instances that are not JSON serializable
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = describe_validation_error(errors[0]) if errors else "The request is invalid."
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(400, message, _details(errors))


async def chain_validation_handler(request: Request, exc: ChainValidationError) -> JSONResponse:
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    details = {"field": exc.field} if exc.field else None
    return error_response(400, str(exc), details)


async def chain_client_error_handler(request: Request, exc: ChainClientError) -> JSONResponse:
    logger.error(
        f"Contract call failed in {request.method} {request.url.path}: {exc}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return error_response(500, str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, NOT_FOUND_MESSAGE)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed."
    return error_response(exc.status_code, message)
