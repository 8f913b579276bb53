"""Utilities module for the MoodFi relay."""

from moodfi.utils.logger import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]
