import logging
import os
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``drillgeo`` package logger.

    Level defaults to ``DRILLGEO_LOG_LEVEL`` (INFO when unset). Existing
    handlers are replaced so a reload does not duplicate output.
    """
    if level is None:
        level = os.getenv("DRILLGEO_LOG_LEVEL", "INFO").upper()

    logger = logging.getLogger("drillgeo")
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
