"""Process-wide logging setup."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """Install a single stream handler on the root logger.

    Args:
        level: Level name such as ``INFO`` or ``WARNING``
        sql_echo: Emit SQLAlchemy statement logs at INFO
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())

    if sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
