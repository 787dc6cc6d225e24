"""Logging configuration for the PRO CLI"""

import logging
import os

from settings import LOG_LEVEL

DEBUG_LOG_FILE = "pro_auth_debug.log"


def setup_logging(debug: bool = False, log_file: str = DEBUG_LOG_FILE) -> None:
    """Configure the root logger

    Without debug, messages at LOG_LEVEL go to stderr. With debug, everything
    is logged at DEBUG and also appended to log_file.

    Args:
        debug: Enable debug logging
        log_file: Debug log path
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not debug:
        level = getattr(logging, str(LOG_LEVEL).upper(), logging.INFO)
        root_logger.setLevel(level)
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        return

    root_logger.setLevel(logging.DEBUG)
    file_handler = logging.FileHandler(os.path.abspath(log_file), mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {os.path.abspath(log_file)}")
