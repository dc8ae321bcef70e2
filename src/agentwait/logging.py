"""Logging configuration for agentwait."""

import logging
import sys

from .config import state_dir


LOG_FILENAME = "agentwait.log"


def setup_logging(component: str | None = None) -> logging.Logger:
    """
    Configure logging to ~/.agentwait/agentwait.log

    Args:
        component: Optional component name, e.g. "hook" or "runner".
            When given, the matching child logger is returned.

    Returns:
        logging.Logger: Configured logger instance
    """
    log_path = state_dir() / LOG_FILENAME

    # Create logger
    logger = logging.getLogger("agentwait")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path)
        handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
    except OSError as e:
        # If log file can't be created, log to stderr as fallback.
        # stdout belongs to the wrapped agent.
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        logger.addHandler(console_handler)
        logger.warning(f"Could not create log file at {log_path}: {e}")

    if component:
        return logger.getChild(component)
    return logger
