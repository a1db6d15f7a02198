#!/usr/bin/env python3
"""
Event Chat API Server

Serves the durable comment and event membership endpoints.
"""

import logging
import os

import uvicorn

from store import (
    DEFAULT_DATABASE_URL,
    create_db_engine,
    create_session_factory,
    create_tables,
)

from .app import create_app

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the API server."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting event chat API server...")

    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "8000"))
    database_url = os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)

    engine = create_db_engine(database_url)
    create_tables(engine)
    app = create_app(create_session_factory(engine))

    logger.info(f"API server listening on http://{host}:{port}")
    try:
        uvicorn.run(app, host=host, port=port)
    finally:
        engine.dispose()
        logger.info("API server stopped")


if __name__ == "__main__":
    main()
