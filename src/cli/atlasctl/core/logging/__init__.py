"""Logging utilities for atlasctl."""

from .formatter import AtlasLogFormatter, AtlasLogHandler
from .logger import AtlasLogger, LogLevel, configure_logging, get_logger

__all__ = [
    "AtlasLogFormatter",
    "AtlasLogHandler",
    "AtlasLogger",
    "LogLevel",
    "configure_logging",
    "get_logger",
]
