import logging

__all__ = ["logger"]

logger = logging.getLogger("libotp")
logger.addHandler(logging.NullHandler())
