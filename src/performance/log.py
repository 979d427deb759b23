# ABOUTME: Configures structlog for the analytics core and its CLI.
# ABOUTME: Renders key/value console logs by default and JSON lines on request.

from __future__ import annotations

import logging
import sys
from typing import List

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Set up structlog processors and the matching stdlib root level.

    Logs go to stderr so CLI output on stdout stays machine-readable.
    """

    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors: List[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)


def get_logger(name: str):
    return structlog.get_logger(name)
