#!/usr/bin/env python3
"""
Uvicorn runner script for the WrapSync relay.
Loads settings from the environment (and .env) and starts the Socket.IO
wrapped FastAPI server on the configured port.
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from wrapsync.config.settings import ConfigurationError, ServerSettings
from wrapsync.logging_config import setup_logging


def main():
    """Start the Socket.IO-wrapped FastAPI application with uvicorn."""
    load_dotenv()
    try:
        settings = ServerSettings.from_env()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    logger = setup_logging(settings.log_level)
    logger.info(
        "Starting relay on %s:%d (retention=%s, chat=%s)",
        settings.host, settings.port, settings.retention_policy.value, settings.chat_protocol.value,
    )

    uvicorn.run(
        "wrapsync.api.app:socket_app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=logging.getLevelName(logging.getLogger().level).lower(),
    )


if __name__ == "__main__":
    main()
