"""Process-level logging setup for the relay entry point.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed once here, from the entry point.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s %(levelname).3s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(
    level: str | int = "INFO",
    log_file: str | Path | None = "logs/log.txt",
    *,
    logger_name: str | None = None,
) -> logging.Logger:
    """Attach console and (optionally) file handlers to *logger_name*.

    Existing handlers on that logger are replaced so repeated calls do not
    duplicate output. Returns the configured logger.
    """
    target = logging.getLogger(logger_name)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    target.setLevel(level)

    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    target.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        target.addHandler(file_handler)

    return target
