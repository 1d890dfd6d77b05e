import logging
import sys

from ..config import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"

def get_logger(name: str = "cartguard") -> logging.Logger:
    """Return the service logger, attaching a stderr handler on first use."""
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        log.addHandler(handler)
        log.setLevel(settings.LOG_LEVEL.upper())
    return log

logger = get_logger()
