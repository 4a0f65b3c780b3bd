"""
Request logging middleware.

Logs every request line and the response status with its duration.
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("hoa_complaints.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log REQUEST / RESPONSE lines around each call."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        logger.info("REQUEST %s %s", request.method, path)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info("RESPONSE %s in %.0f ms", response.status_code, elapsed_ms)
        return response
