"""Logging setup for the ``color_tracker`` namespace.

Log records go to stderr so that tabular results printed on stdout stay
clean when redirected.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from color_tracker.core.config import LoggingSettings

NAMESPACE = "color_tracker"


def setup_logging(
    settings: LoggingSettings | None = None,
    level: str | None = None,
) -> logging.Logger:
    """Configure the package logger from logging settings.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        settings: Logging settings (uses defaults if None)
        level: Level overriding ``settings.level``, e.g. from a command-line flag

    Returns:
        The configured package logger
    """
    settings = settings or LoggingSettings()
    log_level = logging.getLevelName((level or settings.level).upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)

    package_logger = logging.getLogger(NAMESPACE)
    package_logger.setLevel(log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.debug(
        "Logging at %s%s",
        logging.getLevelName(log_level),
        f", also writing to {settings.file}" if settings.file else "",
    )
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Script loggers (``__main__``) are placed under it too, so that
    :func:`setup_logging` controls them.
    """
    if name != NAMESPACE and not name.startswith(f"{NAMESPACE}."):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)
