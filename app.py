#!/usr/bin/env python3
"""
Main entry point for the short-link service.

Concurrency: requests are served by one uvicorn process using async I/O. The
registry serializes mutations with an in-process lock, so the service runs a
single worker.

Usage:
    python app.py

Environment variables:
    STORE_URL - memory://, postgresql://... or redis://...
    CREATE_TABLES - Set to 'true' to create the PostgreSQL table on startup
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    DEFAULT_VALIDITY_MINUTES - Validity used when a request omits it
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlink.registry import LinkRegistry
from shortlink.shortcode import ShortCodeGenerator
from shortlink.storage import create_store
from shortlink.common.logging_config import setup_logging
from web_app import create_app


def build_registry(config: Config, logger) -> LinkRegistry:
    """Build the store and the registry that owns it."""
    store = create_store(
        config.store_url,
        create_tables=config.create_tables,
        pool_max_size=config.pool_max_size,
        key_prefix=config.redis_key_prefix,
        logger=logger,
    )
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    return LinkRegistry(
        store=store,
        short_code_generator=generator,
        logger=logger,
        max_generation_attempts=config.max_generation_attempts,
        max_code_length=config.max_code_length,
        allow_expired_code_reuse=config.allow_expired_code_reuse,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting short-link service...")
    logger.info(f"Opening link store at {config.store_url.split('@')[-1]}")

    registry = build_registry(config, logger)
    await registry.store.initialize()
    app.state.registry = registry

    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down short-link service...")
        await registry.close()
        app.state.registry = None
        logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short-link Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'store_url'})}")

    # Registry is created in lifespan so it lives on the server's event loop
    app = create_app(registry=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
