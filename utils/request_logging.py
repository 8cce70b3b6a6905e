"""
Request lifecycle logging.

Logs the start of every HTTP request, its completion with status code and
latency, and failures that escape the route handlers.
"""

import time
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        path = request.url.path

        logger.info(f"Request started: {method} {path}")
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as exc:
            latency_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} after {latency_ms:.2f}ms - {exc}",
                exc_info=True
            )
            raise

        latency_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request completed: {method} {path} -> {response.status_code} in {latency_ms:.2f}ms"
        )
        return response
