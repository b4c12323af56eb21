"""Process-wide logging for contactsheet runs.

Worker threads log concurrently, so every record carries the thread name
next to the module. Pillow's PNG plugin reports each chunk it reads at
DEBUG; that chatter is held at WARNING even under ``--log-level debug``.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)-15s | %(name)s | %(message)s"
QUIET_LOGGERS = ("PIL",)


def setup_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt="%H:%M:%S", stream=sys.stdout)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
