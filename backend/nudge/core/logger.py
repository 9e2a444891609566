"""
Logging setup.

Modules either import the shared ``logger`` or create their own with
``setup_logger(__name__)``.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """Return a logger with a single stream handler attached to the root 'nudge' logger."""
    root = logging.getLogger("nudge")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        if level is None:
            from nudge.core.config import get_settings

            level = get_settings().LOG_LEVEL
        root.setLevel(level.upper())

    if name == "nudge" or name.startswith("nudge."):
        return logging.getLogger(name)
    return logging.getLogger(f"nudge.{name}")


logger = setup_logger("nudge")

# Keep SQL echo out of application logs
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
