"""Logging configuration using structlog.

One line per event (download, skip, notification) on stdout, readable on a
terminal or in cron mail, or as JSON for log shippers.
"""

import logging
import sys
from typing import TextIO

import structlog

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log each HTTP request on their own
_CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for a feedgrab run.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: Emit JSON lines instead of console output.
        stream: Destination for log lines (stdout if None).
    """
    stream = stream or sys.stdout
    level = getattr(logging, log_level.upper())

    logging.basicConfig(format="%(message)s", stream=stream, level=level, force=True)

    # The downloader already logs every request with its outcome
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
