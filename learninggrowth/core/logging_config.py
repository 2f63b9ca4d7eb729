"""
Logging setup shared by the API server and the contract layer.

Levels, line format and the optional log file come from :mod:`learninggrowth.core.config`
(``LEARNINGGROWTH_LOG_LEVEL``, ``LEARNINGGROWTH_LOG_FORMAT``, ``LEARNINGGROWTH_LOG_FILE_DIR``,
``LEARNINGGROWTH_ENABLE_FILE_LOGGING``). Modules obtain loggers through :func:`get_logger`.
"""

import logging
from pathlib import Path
from typing import Optional

from learninggrowth.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.enable_file_logging

LOG_FILE_NAME = "learninggrowth.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d %(funcName)s] %(message)s"

JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"location": "%(filename)s:%(lineno)d", "message": "%(message)s"}'
)

_FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

# Per-logger levels applied on every setup
MODULE_LOG_LEVELS = {
    "learninggrowth.chain": "INFO",
    "learninggrowth.services": "INFO",
    "learninggrowth.server": "INFO",
    "learninggrowth.server.api": "DEBUG",
    "web3": "WARNING",
    "web3.providers": "WARNING",
    "web3.manager": "WARNING",
    "aiohttp": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _file_handler(formatter: logging.Formatter) -> logging.Handler:
    log_dir = Path(LOG_FILE_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    (Re)configure the root logger.

    Existing root handlers are replaced, so calling this twice is harmless.
    The root logger passes everything through; the console handler filters at
    ``log_level`` while the log file, when enabled, keeps DEBUG records too.

    Args:
        log_level: Console level; defaults to ``LEARNINGGROWTH_LOG_LEVEL``.
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``.
        enable_file: Allow the file handler. It is only added when file logging is also enabled in settings.
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    write_file = enable_file and ENABLE_FILE_LOGGING
    if write_file:
        root_logger.addHandler(_file_handler(formatter))

    for logger_name, logger_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(logger_name).setLevel(logger_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={write_file}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (usually ``__name__``)."""
    return logging.getLogger(name)
