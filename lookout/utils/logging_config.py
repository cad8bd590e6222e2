"""Centralized logging configuration for Lookout."""

import logging
import os
import sys

from lookout.constants import LOG_LEVEL_ENV_VAR


def configure_logging() -> None:
    """Configure logging for processes embedding Lookout.

    Respects the LOOKOUT_LOG_LEVEL environment variable:
    - DEBUG: Verbose logging, one line per storage read
    - INFO: Info and above
    - WARNING: Warning and above (default)
    - ERROR: Error and above
    """
    log_level_name = os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for handler in logging.getLogger().handlers:
        handler.setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
