"""Logging configuration for the MoodFi relay."""

import sys
from pathlib import Path

from loguru import logger as loguru_logger

from moodfi.config import LoggingConfig, get_config


def setup_logging(config: LoggingConfig = None) -> None:
    """Setup logging from the logging config section.

    Args:
        config: Logging section. If None, uses the global config.
    """
    config = config or get_config().logging

    level = config.level
    output_file = config.output_file
    use_json = config.format == "json"

    # Remove default logger
    loguru_logger.remove()

    log_format = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"

    if use_json:
        # JSON format for production
        loguru_logger.add(
            sys.stderr,
            format="{time} {level} {name} {function} {line} {message}",
            level=level,
            serialize=True
        )
    else:
        # Human-readable format for development
        loguru_logger.add(
            sys.stderr,
            format=log_format,
            level=level,
            colorize=True
        )

    if output_file:
        log_path = Path(output_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        loguru_logger.add(
            output_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            serialize=use_json
        )

    loguru_logger.info(f"Logging initialized: level={level}, file={output_file}")


def get_logger(name: str):
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return loguru_logger.bind(name=name)
