#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: records live in one in-memory store guarded by a lock, so run a
single uvicorn worker; every worker process would otherwise hold its own,
unrelated set of short codes.

Usage:
    python app.py

Environment variables:
    HOST - Interface to bind (default 0.0.0.0)
    PORT - Port to listen on (default 3001)
    BASE_URL - Base URL for short links when the request has no Host header
    PATH_PREFIX - Path prefix for short links
    API_PREFIX - Prefix for the JSON routes
    SHORT_CODE_LENGTH - Length of generated short codes
    LOG_LEVEL - Logging level
    LOG_JSON - Set to 'true' for JSON log lines
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from lib.database.memory import InMemoryURLStore
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger

    logger.info("URL shortener service started")

    yield

    logger.info(
        f"Shutting down URL shortener service; "
        f"{app.state.service.store.count()} in-memory URLs will be discarded"
    )


def build_app(config: Config, logger) -> FastAPI:
    """Wire generator, store, service and FastAPI app together."""
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    store = InMemoryURLStore(
        short_code_generator=generator,
        max_collision_retries=config.max_collision_retries,
        max_click_history=config.max_click_history,
    )
    service = URLShortenerService(
        store=store,
        logger=logger.getChild("service"),
        enable_custom_codes=config.enable_custom_codes,
    )

    app = create_app(
        service_instance=service,
        config=config,
        logger=logger.getChild("web"),
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


def main():
    """Main entry point."""
    # Load configuration
    config = load_config()

    # Setup logging
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = build_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,  # LoggingMiddleware logs every request
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    # Run server
    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
