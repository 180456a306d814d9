#!/usr/bin/env python3
"""
Simple script to run the heat loss API server
"""
import logging

import uvicorn

from heatloss.app.config import get_settings, setup_logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.debug)

    logger.info(f"Starting heat loss API on http://{settings.host}:{settings.port}")
    logger.info(f"API documentation: http://{settings.host}:{settings.port}/docs")

    try:
        uvicorn.run(
            "heatloss.app.main:app",
            host=settings.host,
            port=settings.port,
            reload=settings.debug,
            log_level="debug" if settings.debug else "info"
        )
    except KeyboardInterrupt:
        logger.info("Server stopped")
