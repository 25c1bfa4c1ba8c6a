"""Logging configuration for wtpick."""

import logging
import sys

from wtpick.constants import CONFIG_DIR, LOG_FILE_NAME


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger.

    The picker owns the terminal while it runs, so verbose output goes to a
    log file; the console only gets warnings and errors.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if verbose:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(CONFIG_DIR / LOG_FILE_NAME, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(fmt="[%(name)s] %(message)s"))
    root_logger.addHandler(console_handler)
