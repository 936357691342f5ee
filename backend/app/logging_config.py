"""
Logging setup for the API process.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr at the configured level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # No-op when the server already installed handlers
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(numeric_level)

    # APScheduler logs every job run at INFO
    if numeric_level > logging.DEBUG:
        logging.getLogger("apscheduler").setLevel(logging.WARNING)
