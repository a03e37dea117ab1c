"""Logging configuration for the command line tool.

Diagnostics go to standard error so that point data can be piped through
standard output.
"""

import logging
import sys
from pathlib import Path

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


# 0 shows warnings and errors, 1 adds progress and timing, 2 adds point details
def setup_logging(verbosity=0, log_dir=None):
    log_level = LOG_LEVELS[min(max(verbosity, 0), len(LOG_LEVELS) - 1)]

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "las_transform.log"
    else:
        log_file = None

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )
