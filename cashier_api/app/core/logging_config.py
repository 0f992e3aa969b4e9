"""
Logging setup for the cashier service.

Only the ``cashier_api`` logger hierarchy is configured, so uvicorn and
other libraries keep their own handlers and levels.  Records go to the
console and, when ``LOG_FILE`` is set, to that file as well.
"""

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "cashier_api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Attach handlers to the ``cashier_api`` logger and return it.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        File to append records to.  Missing parent directories are
        created.

    Calling it again is a no-op while handlers are attached, which is
    the case whenever the app module has been imported.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
