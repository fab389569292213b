"""
Logging utilities for the service.

Provides a consistent logging format and a per-request access log line.
"""

import logging
import sys
import time
from typing import Awaitable, Callable

from fastapi import Request, Response

access_logger = logging.getLogger("piratepanda.access")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """HTTP middleware emitting one line per handled request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    # Only the path is logged; the query string may carry a token.
    access_logger.info(
        "%s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


__all__ = ["configure_logging", "log_requests"]
