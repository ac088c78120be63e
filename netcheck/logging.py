"""Logging configuration for netcheck.

Provides two logging modes:
- Default: WARNING level only (quiet)
- Debug tracing: DEBUG level with flush after every record, optionally
  prefixed with perf_counter timestamps

Usage:
    from netcheck.logging import logger, enable_debug_logging

    # Default - only warnings and checker errors
    logger.warning("This will show")
    logger.info("This won't show")

    # Enable for tracing the individual checker passes
    enable_debug_logging()
    logger.debug("Now this shows and flushes immediately")
"""

import logging
import sys
import time

# Create the netcheck logger
logger = logging.getLogger("netcheck")

# Default: WARNING level only (quiet operation)
logger.setLevel(logging.WARNING)

# Add a default handler if none exists
if not logger.handlers:
    _default_handler = logging.StreamHandler(sys.stdout)
    _default_handler.setLevel(logging.WARNING)
    _default_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_default_handler)


class FlushingHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit."""

    def emit(self, record):
        super().emit(record)
        self.flush()


class PerfCounterHandler(logging.StreamHandler):
    """StreamHandler that prepends time.perf_counter() and flushes after every emit.

    Useful for timing the individual checker passes on large netlists.
    """

    def emit(self, record):
        record.msg = f"[{time.perf_counter():.6f}] {record.msg}"
        super().emit(record)
        self.flush()


def enable_debug_logging(with_perf_counter: bool = False):
    """Enable DEBUG level logging with immediate flush.

    Args:
        with_perf_counter: If True, prepend time.perf_counter() timestamps.
    """
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if with_perf_counter:
        handler = PerfCounterHandler(sys.stdout)
    else:
        handler = FlushingHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


def set_log_level(level: int):
    """Set the logging level.

    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, etc.
    """
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
