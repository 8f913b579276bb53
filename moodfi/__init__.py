"""MoodFi relay: emotion-aware chat completion backend."""

__version__ = "1.0.0"
