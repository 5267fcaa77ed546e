"""Request logging middleware."""

import time
import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shortlink.common.logging_config import get_logger

# Polled by load balancers; logged at DEBUG to keep INFO readable
QUIET_PATHS = frozenset({"/health", "/api/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and duration."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        client_ip = request.headers.get("x-forwarded-for") or (
            request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(f"Unhandled error: {request.method} {request.url.path} from {client_ip}")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        level = logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO
        self.logger.log(
            level,
            f"{request.method} {request.url.path} from {client_ip} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms",
        )

        return response
