"""
Logging configuration for the order-finance CLI.

Debug runs get timestamped records with the logger name, in cyan on a
terminal. Normal runs get ``LEVEL message`` lines so command output stays
readable.
"""

import logging
import sys

QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm')


class DebugFormatter(logging.Formatter):
    """Timestamp, logger name and message."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{record.created:.3f}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if sys.stderr.isatty():
            return f"\033[0;36m{line}\033[0m"
        return line


def setup_logging(debug: bool = False, level: str = 'INFO') -> None:
    """Configure the root logger for a CLI run.

    Args:
        debug: Enable debug logging, overrides ``level``
        level: Level name used when debug is off
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(DebugFormatter() if debug else logging.Formatter('%(levelname)s %(message)s'))
    root_logger.addHandler(handler)

    # SQL echo is never useful at order level
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``order_finance`` namespace."""
    if not name.startswith('order_finance'):
        name = f"order_finance.{name}"
    return logging.getLogger(name)
