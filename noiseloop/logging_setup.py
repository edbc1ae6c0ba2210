"""Console and optional file logging for render runs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOGGER_NAME = "noiseloop"


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Send log records to stdout and, when ``log_file`` is given, to that file.

    The log file's parent directory is created if needed.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=handlers,
        force=True,
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


__all__ = ["configure_logging"]
