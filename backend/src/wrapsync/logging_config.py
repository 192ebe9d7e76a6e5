"""Process-wide logging setup."""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the root logger once and return the package logger.

    Socket.IO and Engine.IO loggers are kept at WARNING; their INFO output
    repeats every packet.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    for noisy in ("socketio", "engineio", "socketio.server", "engineio.server"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logging.getLogger("wrapsync")
