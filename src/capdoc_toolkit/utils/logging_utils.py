"""
Module: utils.logging_utils

Purpose:
    Forward package log records to a queue so an export console can show
    generation progress and layout warnings while generate() runs.

Key Classes:
    - QueueLogHandler: Puts (message, level name) pairs on a queue

Key Functions:
    - forward_logs(): Context manager attaching a QueueLogHandler for one run

Used By:
    - exporter.controller: generate(log_queue=...)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from queue import Queue
from typing import Iterator

PACKAGE_LOGGER = "capdoc_toolkit"


class QueueLogHandler(logging.Handler):
    """
    Logging handler producing ``(message, level_name)`` tuples.

    Consoles colour INFO, WARNING and ERROR only, so DEBUG records are
    reported as INFO.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            shown_level = logging.getLevelName(max(record.levelno, logging.INFO))
            self.log_queue.put((self.format(record), shown_level))
        except Exception:
            self.handleError(record)


@contextmanager
def forward_logs(log_queue: Queue, level: int = logging.INFO) -> Iterator[QueueLogHandler]:
    """
    Forward ``capdoc_toolkit`` log records to ``log_queue`` inside the block.

    The package logger's level is lowered to ``level`` if needed and
    restored, with the handler removed, on exit.

    Example:
        >>> q = Queue()
        >>> with forward_logs(q):
        ...     generate(settings, content)
        >>> q.get_nowait()
        ('Generating ...', 'INFO')
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    handler = QueueLogHandler(log_queue, level)
    previous_level = logger.level
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
