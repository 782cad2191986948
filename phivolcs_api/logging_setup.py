# phivolcs_api/logging_setup.py
from __future__ import annotations
import logging
import sys

ROOT_LOGGER = "phivolcs_api"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx logs every request at INFO; the refresh log line already covers it
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    logger.propagate = False

    # create_app() and the CLI may both run in one process
    if not any(getattr(h, "phivolcs_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.phivolcs_handler = True
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger
