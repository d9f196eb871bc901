"""
Logging Configuration
Sets up the package logger for the embedding UI shell (or a test session).
"""
import logging
import sys
from typing import Optional, Union

# Logger of the navigation engine; it logs every descend/ascend at DEBUG level.
NAVIGATION_LOGGER = "circletree.model.scene"


def _resolve_level(level: Union[int, str]) -> int:
    """Accepts logging.DEBUG as well as 'debug' / 'DEBUG' coming from a settings file."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level!r}")
        return resolved
    return level


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    navigation_level: Optional[Union[int, str]] = None,
) -> logging.Logger:
    """
    Configures the logger for the 'circletree' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, "info").
        log_file: Optional path to save logs to a file.
        navigation_level: Optional separate level for the navigation engine,
            which is noisy at DEBUG while the user walks the tree.

    Returns:
        The configured package logger.
    """
    level = _resolve_level(level)
    logger = logging.getLogger("circletree")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs when the shell re-creates the scene
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

    nav_logger = logging.getLogger(NAVIGATION_LOGGER)
    if navigation_level is not None:
        nav_logger.setLevel(_resolve_level(navigation_level))
    else:
        nav_logger.setLevel(logging.NOTSET)

    logger.info("Logging initialized.")
    return logger
