"""Middleware modules for EduQuest Backend"""

from .logging_middleware import LoggingMiddleware
from .request_id import RequestIDMiddleware

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
