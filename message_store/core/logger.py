"""
Application logger.

Import ``logger`` from here instead of calling ``logging.getLogger`` in every
module; ``configure_logging`` sets up the root handler once.
"""

import logging

from message_store.core.config import get_settings

logger = logging.getLogger("message_store")


def configure_logging() -> None:
    """Configure console logging at the level given by LOG_LEVEL."""
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.strip().upper(), logging.INFO)

    # Avoid double-config when called multiple times.
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    if level >= logging.INFO:
        for noisy in ["sqlalchemy.engine", "aiosqlite"]:
            logging.getLogger(noisy).setLevel(logging.WARNING)
