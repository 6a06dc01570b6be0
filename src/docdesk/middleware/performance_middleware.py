"""
Performance tracking middleware for monitoring request/response metrics
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class PerformanceMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and latency for every request
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        process_time_ms = round(process_time * 1000, 2)

        logger.info(
            f"PERFORMANCE: method={request.method} path={request.url.path} "
            f"status={response.status_code} latency={process_time_ms}ms "
            f"request_id={getattr(request.state, 'request_id', 'unknown')}"
        )

        response.headers["X-Process-Time"] = str(process_time_ms)

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"SLOW_REQUEST: method={request.method} path={request.url.path} "
                f"latency={process_time_ms}ms"
            )

        return response
