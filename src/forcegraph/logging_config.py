"""
Logging Configuration
Sets up the global logger for the application.
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the 'forcegraph' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG or "DEBUG")
        log_file: Optional path to save logs to a file.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level}")

    logger = logging.getLogger("forcegraph")
    logger.setLevel(level)

    # Avoid duplicate handlers when the window re-creates the application
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Keep pyqtgraph at WARNING or above
    logging.getLogger("pyqtgraph").setLevel(max(level, logging.WARNING))

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
