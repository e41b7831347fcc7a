"""Root logger setup shared by the API process and the Celery worker."""

import logging
import time


class UTCFormatter(logging.Formatter):
    """Formatter that stamps records in UTC."""

    converter = time.gmtime


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Install a single stream handler on the root logger.

    Calling this more than once only updates the level.
    """
    logger = logging.getLogger()
    if not logger.handlers:
        formatter = UTCFormatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level.upper())
    return logger
