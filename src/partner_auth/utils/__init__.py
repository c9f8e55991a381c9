"""Shared utility helpers for the partner credential client."""

from .logging import LoggingOptions, configure_logging, get_logger, log_file_path

__all__ = [
    "LoggingOptions",
    "configure_logging",
    "get_logger",
    "log_file_path",
]
