"""
FastAPI application entrypoint for piratepanda.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI

from piratepanda import __version__
from piratepanda.api.routes import router as api_router
from piratepanda.core.config import AppSettings, get_settings, load_settings
from piratepanda.core.errors import StartupConfigError
from piratepanda.core.logging import configure_logging, log_requests

logger = logging.getLogger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Factory for the FastAPI application."""
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Server running at: %s", settings.server_url)
        yield

    app = FastAPI(
        title="piratepanda",
        version=__version__,
        description="Log in with Google and trade the result for a short-lived JWT.",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.middleware("http")(log_requests)
    app.include_router(api_router)
    return app


def run() -> int:
    """Console entry point: validate configuration, then serve with uvicorn."""
    try:
        settings = load_settings()
    except StartupConfigError as exc:
        print(f"piratepanda cannot start. {exc}", file=sys.stderr)
        return 1

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )
    return 0


__all__ = ["create_app", "run"]
