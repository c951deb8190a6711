"""Logging configuration for TalentLens."""

import logging
import sys
from typing import Optional

from talentlens import config


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance (stderr, so JSON on stdout stays clean)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, (level or config.LOG_LEVEL).upper(), logging.WARNING))
    elif level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger
