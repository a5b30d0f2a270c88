"""Logging configuration for the pool service and scripts.

Records carry the thread name so backend calls made on bridge workers
("pool-io_N") can be told apart from the event loop thread ("MainThread").
"""

import logging
import sys

from resource_pool.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s"

# SDK loggers that are chatty at DEBUG (one line per HTTP request).
_QUIET_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


def setup_logging(debug: bool | None = None) -> None:
    """Configure process-wide logging to stdout.

    Args:
        debug: DEBUG level when True, INFO otherwise. Defaults to
            settings.debug.
    """
    if debug is None:
        debug = get_settings().debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
