"""Request logging middleware for paginated list requests."""

import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log list requests with their query string and timing."""

    def __init__(self, app, path_prefix: str = "/v1/records"):
        super().__init__(app)
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        """Log request details and call next middleware."""
        if request.method != "GET" or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            f"GET {request.url.path}?{request.url.query} -> {response.status_code} ({elapsed_ms:.1f} ms)",
            extra={
                "path": request.url.path,
                "query": request.url.query,
                "status_code": response.status_code,
                "elapsed_ms": elapsed_ms
            }
        )
        return response
