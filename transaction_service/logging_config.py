"""
Logging configuration.
One console handler on the root logger; modules use logging.getLogger(__name__).
"""
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Set up the root logger. Safe to call more than once."""
    resolved = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    # Remove existing handlers to avoid duplicates on reload
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(resolved)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))

    logging.getLogger(__name__).info("Logging configured at %s", logging.getLevelName(resolved))
