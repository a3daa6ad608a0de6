import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger configured with basicConfig.

    ``GAMEBOOK_LOG_LEVEL`` picks the root level (default ``WARNING`` so the
    interactive transcript stays clean).
    """
    level = os.getenv("GAMEBOOK_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format="%(levelname)s:%(name)s:%(message)s")
    return logging.getLogger(name)
