import logging
import sys
from typing import Optional, TextIO

# Matches the timestamps of the replication log: 10/18/2026 09:15:02.417: message
LOG_FORMAT = "%(asctime)s.%(msecs)03d: %(message)s"
DATE_FORMAT = "%m/%d/%Y %H:%M:%S"


def configure_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a timestamped handler to the package logger.

    Args:
        debug: Log at DEBUG instead of INFO
        stream: Output stream, stderr by default

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger("dynamodb_replicator")
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.handlers = [handler]
    package_logger.propagate = False

    # botocore logs every retry at DEBUG; keep it out unless asked for
    logging.getLogger("botocore").setLevel(logging.DEBUG if debug else logging.WARNING)
    return package_logger
