"""
Request ID middleware for EduQuest Backend
Adds unique request ID for tracing and debugging
"""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reuse the caller's X-Request-ID or mint one, expose it on request.state
    and echo it back on the response
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        logger.debug(f"Processing request {request_id}: {request.method} {request.url.path}")

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
