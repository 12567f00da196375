"""
Logging for linkpreview.

Everything logs under the "linkpreview" logger; each pipeline stage gets a
child ("linkpreview.fetcher", "linkpreview.metadata_cache", ...) so output
shows where a message came from. The missing-cache-directory warning goes
through here too, once per preview.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = "linkpreview",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach stdout (and optionally file) output to the package logger.

    Safe to call more than once: the resolver and the CLI both call it to
    change verbosity, and later calls only adjust the level.

    Args:
        name: Logger to configure
        level: Threshold for emitted records
        log_file: Also append records to this file

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Child of the package logger for one module, e.g. get_module_logger("fetcher")."""
    return logging.getLogger(f"linkpreview.{module_name}")
