"""
HTTP error type and envelope rendering.

Routes raise :class:`HttpError` for problems they detect themselves; every
handler in this package renders its response through :func:`error_response`
so clients always receive ``{"success": false, "error": {...}}``.
"""

from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from learninggrowth.core.logging_config import get_logger

logger = get_logger(__name__)


class HttpError(Exception):
    """An error carrying the HTTP status code it should be rendered with."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


def error_response(status_code: int, message: str, details: Optional[Any] = None) -> JSONResponse:
    error: dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def http_error_handler(request: Request, exc: HttpError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.details)
