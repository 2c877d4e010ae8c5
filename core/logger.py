"""Structured logger for delegate components

Every line is attributed to a source label (e.g. "Browser") and a
normalized level name. Sources map to stdlib loggers of the same name.
"""

import logging
import sys


# Normalized level names used across the delegate
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def log(source: str, level: str, message: str) -> None:
    """Log a message under a source label.

    Unknown level names fall back to info.
    """
    logging.getLogger(source).log(LEVELS.get(level, logging.INFO), message)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure process logging (goes to terminal)."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
