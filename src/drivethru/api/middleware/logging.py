"""
Request logging middleware.

One line when a request arrives and one when its response is ready,
tagged with the delivery endpoint and artifact name parsed from the path.
"""

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# First path segment of the artifact endpoints
DELIVERY_ENDPOINTS = frozenset({"download", "hash", "get"})


def describe_path(path: str) -> tuple[str, str | None]:
    """
    Split a request path into endpoint and artifact name.

    ``/download/agent/linux/amd64`` gives ``("download", "agent")``;
    non-delivery paths give the first segment and None.
    """
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "root", None
    endpoint = segments[0]
    if endpoint in DELIVERY_ENDPOINTS and len(segments) > 1:
        return endpoint, segments[1]
    return endpoint, None


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Install scripts usually run behind a proxy, so forwarded headers win.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with its artifact and timing.

    Archive bodies are streamed after the response object is returned, so
    for downloads ``duration_ms`` measures the time to the first chunk,
    not the whole transfer.

    Args:
        app: ASGI application
        logger_instance: Custom logger instance
        skip_paths: Paths not logged at all (``/health`` by default)
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        logger_instance: logging.Logger | None = None,
        skip_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._logger = logger_instance or logger
        self._skip_paths = {"/health", "/health/live"} if skip_paths is None else set(skip_paths)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        if path in self._skip_paths:
            return await call_next(request)

        endpoint, artifact = describe_path(path)
        request_id = request.headers.get("x-request-id", "unknown")
        context = {
            "method": request.method,
            "path": path,
            "endpoint": endpoint,
            "artifact": artifact,
            "client_ip": get_client_ip(request),
            "request_id": request_id,
        }
        self._logger.info(f"{request.method} {path}", extra={"event": "request_started", **context})

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            self._logger.error(
                f"{request.method} {path} failed: {e}",
                extra={"event": "request_failed", **context},
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration_ms:.2f} ms)",
            extra={
                "event": "request_completed",
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                **context,
            },
        )
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"
        response.headers["X-Request-ID"] = request_id
        return response
