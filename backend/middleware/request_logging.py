"""
Request Logging Middleware
Logs method, path, status code and elapsed time of every request
"""
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request and its outcome
    """
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        logger.info(f"--> {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"<-- {request.method} {request.url.path} failed after {elapsed_ms:.1f}ms: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"<-- {request.method} {request.url.path} {response.status_code} ({elapsed_ms:.1f}ms)")
        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"
        return response
