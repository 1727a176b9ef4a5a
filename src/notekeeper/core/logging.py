"""Logging configuration and request logging middleware."""

from __future__ import annotations

import logging
import logging.config
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeeper.core.settings import Settings

LOG_FORMAT = "[LOGGER] %(asctime)s [%(name)s] %(levelname)s: %(message)s"

logger = logging.getLogger("notekeeper.http")


def configure_logging(app_settings: Settings) -> None:
    """Install the console handler used by every ``notekeeper`` logger."""
    level = app_settings.log_level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "notekeeper": {
                    "handlers": ["console"],
                    "level": level,
                    "propagate": False,
                },
                "sqlalchemy.engine": {
                    "level": "INFO" if app_settings.sql_debug else "WARNING",
                },
            },
        }
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request: method, path, status and latency.

    Request bodies are not logged; they may carry passwords or one-time codes.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d - %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
