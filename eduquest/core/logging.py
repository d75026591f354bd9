"""
Logging configuration for EduQuest Backend
Sets up structured logging with rotation and multiple outputs
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from eduquest.core.config import settings

# Attributes every LogRecord carries; anything else was passed through `extra`
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "environment": settings.ENVIRONMENT,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _rotating_handler(filename: str, level: int) -> logging.Handler:
    Path(filename).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=filename,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """
    Configure application logging
    Sets up console and file handlers with appropriate formatters
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if settings.is_production():
        console_formatter = JSONFormatter()
    else:
        console_formatter = logging.Formatter(fmt=settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File logs are always JSON
    root_logger.addHandler(_rotating_handler(settings.LOG_FILE, logging.DEBUG))
    root_logger.addHandler(
        _rotating_handler(str(Path(settings.LOG_FILE).parent / "error.log"), logging.ERROR)
    )

    # Configure third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.WARNING if settings.is_production() else logging.INFO
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    root_logger.info(
        "Logging configured",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "log_file": settings.LOG_FILE,
        },
    )


class LoggerFactory:
    """Factory for creating loggers with consistent configuration"""

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        return logging.getLogger(name)

    @staticmethod
    def get_request_logger() -> logging.Logger:
        """Get logger for request/response logging"""
        return logging.getLogger("eduquest.request")

    @staticmethod
    def get_audit_logger() -> logging.Logger:
        """
        Get logger for audit events (reward awards, level-ups, attempt completion)

        The dedicated audit file is attached only once logging has been set up,
        so importing services never touches the filesystem.
        """
        logger = logging.getLogger("eduquest.audit")

        if not logger.handlers and logging.getLogger().handlers:
            audit_file = str(Path(settings.LOG_FILE).parent / "audit.log")
            logger.addHandler(_rotating_handler(audit_file, logging.INFO))

        return logger


def log_execution_time(logger: logging.Logger = None):
    """
    Decorator to log function execution time

    Args:
        logger: Logger instance to use
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or logging.getLogger(func.__module__)
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Function {func.__name__} failed",
                    extra={
                        "function": func.__name__,
                        "execution_time": time.perf_counter() - start_time,
                        "success": False,
                        "error": str(e),
                    },
                )
                raise

            log.info(
                f"Function {func.__name__} executed successfully",
                extra={
                    "function": func.__name__,
                    "execution_time": time.perf_counter() - start_time,
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator
