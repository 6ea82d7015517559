"""Logging setup for the CLI."""
import logging
import sys

from harvester.config import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Attach a single stream handler to the root logger."""
    root = logging.getLogger()
    root.setLevel((level or config.LOG_LEVEL).upper())

    # Idempotent: drop handlers left by a previous call
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
