# chatrelay/core/logging.py

import logging
import os
import sys


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging() -> None:
    """
    Configure logging for the relay process.

    - LOG_LEVEL (default INFO) sets the level for the root logger and every
      chatrelay.* logger (joins, leaves, room lifecycle, delivery errors)
    - One stdout handler; if Uvicorn already installed handlers, only the
      level is adjusted
    - Per-request access lines are dropped to WARNING unless ACCESS_LOG=1,
      since health probes and /rooms polling would drown out room events
    - The websockets library logs every frame at DEBUG, so it stays at WARNING
    """
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level_name, logging.INFO)
    access_log = os.getenv("ACCESS_LOG", "0").lower() in ("1", "true", "yes")

    logging.getLogger("chatrelay").setLevel(level)
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO if access_log else logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Logger under the relay's configuration.

    Usage:
        logger = get_logger(__name__)
        logger.info("→ %s joined room %s", username, room_id)
    """
    return logging.getLogger(name)
