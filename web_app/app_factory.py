"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def create_app(
    registry,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        registry: LinkRegistry instance (None when the lifespan builds it)
        config: Configuration instance
        logger: Optional logger for startup/shutdown messages

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="Short links with a bounded validity window and click counting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.registry = registry
    app.state.config = config
    app.state.logger = logger or logging.getLogger("shortlink")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    # API first: the catch-all /{code} redirect must not shadow /api/*
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
