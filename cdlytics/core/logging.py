"""
Logging setup shared by the web application and the check script.
"""

import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Client libraries that log every request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", *, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """Configure root logging; retry and failure logs from cdlytics stay at ``level``."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stdout)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["LOG_FORMAT", "NOISY_LOGGERS", "configure_logging"]
