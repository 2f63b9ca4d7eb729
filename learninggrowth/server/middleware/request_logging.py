"""
Request Logging Middleware for FastAPI.

Records method, path, status and duration of every request, forwards the
numbers to Logfire when monitoring is active and sets ``X-Process-Time``.
"""

import time
from typing import Any, Callable, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from learninggrowth.core.logging_config import get_logger
from learninggrowth.core.monitoring import log_api_request

logger = get_logger(__name__)

# Contract writes wait for mining, so the threshold is generous
SLOW_REQUEST_MS = 5000


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Time each request and report it to the log and to Logfire."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        context: Dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
        }
        label = f"{context['method']} {context['path']}"

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = _elapsed_ms(started)
            logger.error(
                f"API request failed: {label}",
                exc_info=True,
                extra={**context, "duration_ms": duration_ms, "error": str(e)},
            )
            log_api_request(method=context["method"], path=context["path"], status_code=500, duration_ms=duration_ms)
            raise

        duration_ms = _elapsed_ms(started)
        response.headers["X-Process-Time"] = str(duration_ms)
        log_api_request(
            method=context["method"], path=context["path"], status_code=response.status_code, duration_ms=duration_ms
        )

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {label} took {duration_ms:.2f}ms",
                extra={**context, "duration_ms": duration_ms, "status_code": response.status_code},
            )
        else:
            logger.debug(f"{label} -> {response.status_code} ({duration_ms:.2f}ms)")

        return response
