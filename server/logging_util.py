import logging
import sys

# Configure logging format
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Loggers that get the stdout handler
APP_LOGGERS = ("discovery", "server")


def setup_logging(level: str = "INFO") -> None:
    """
    Attach a stdout handler with a consistent format to the application loggers.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG"); unknown names fall back to INFO
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    for name in APP_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(resolved)

        # Avoid adding handlers multiple times
        if not logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
            logger.addHandler(console_handler)
        for handler in logger.handlers:
            handler.setLevel(resolved)
