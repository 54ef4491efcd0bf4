import logging
import sys

PACKAGE_LOGGER = "assistant_admin"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s: %(message)s"


def setup_logger(level: str = "INFO", name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Configure the package logger that every `assistant_admin.*` module logs through.

    Under uvicorn the records go to uvicorn's own handlers so they interleave
    with the access log; standalone they go to stdout. Calling it again only
    updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.propagate = False
    if logger.handlers:
        return logger

    server_handlers = logging.getLogger("uvicorn.error").handlers
    if server_handlers:
        for handler in server_handlers:
            logger.addHandler(handler)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
