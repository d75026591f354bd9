"""
Logging middleware for EduQuest Backend
Logs every request with its outcome and timing
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from eduquest.core.config import settings
from eduquest.core.logging import LoggerFactory

logger = LoggerFactory.get_request_logger()

SKIP_PATHS = {"/", f"{settings.API_V1_STR}/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query": str(request.url.query),
                "client": request.client.host if request.client else "unknown",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "process_time": round(time.perf_counter() - start_time, 3),
                    "error": str(e),
                    "success": False,
                },
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": round(process_time, 3),
                "success": 200 <= response.status_code < 400,
            },
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response
