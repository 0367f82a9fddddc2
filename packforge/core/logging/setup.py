# packforge/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from packforge.app.settings import settings, settingsBool
from .formatters import DevFormatter, JsonFormatter

__all__ = [
    "NO_PROPAGATE",
    "configureLogging",
]



# Disable propagation from noisy libraries
NO_PROPAGATE = [
    "concurrent.futures", "PIL",
]



def configureLogging(level: str | int | None = None) -> None:
    """
    Initiate the global logging configuration.

      - Console logs through DevFormatter (or JsonFormatter with logging.json)
      - Optional rotating JSON file log when logging.file is set
    
    `level` overrides the logging.level setting.
    """
    if level is None:
        level = settings("logging.level", "INFO")
    if isinstance(level, str):
        rootLevel = getattr(logging, level.strip().upper(), logging.INFO)
    else:
        rootLevel = int(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(JsonFormatter() if settingsBool("logging.json", False) else DevFormatter())
    root.addHandler(consoleHandler)

    logFile = settings("logging.file")
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        root.addHandler(fileHandler)

    # Pillow logs every plugin import at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
