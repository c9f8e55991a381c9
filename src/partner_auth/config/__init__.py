"""Configuration helpers for the partner credential client."""

from .settings import (
    DEFAULT_API_KEY,
    DEFAULT_BASE_URL,
    DEFAULT_TOKEN_URL,
    Settings,
    SettingsManager,
)

__all__ = [
    "DEFAULT_API_KEY",
    "DEFAULT_BASE_URL",
    "DEFAULT_TOKEN_URL",
    "Settings",
    "SettingsManager",
]
