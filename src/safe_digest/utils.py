import logging

logger = logging.getLogger("safe_digest")
logger.addHandler(logging.NullHandler())
