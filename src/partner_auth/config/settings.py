from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_cache_dir, user_config_dir

from partner_auth.issuer.errors import ConfigurationError
from partner_auth.utils import get_logger

APP_NAME = "PartnerAuth"
ENV_PREFIX = "PARTNER_"
ENV_FILE_NAME = "settings.env"

PRODUCTION_ENVIRONMENT = "production"

DEFAULT_TOKEN_URL = "https://uat-platform.bankkaro.com/partner/token"
DEFAULT_BASE_URL = "https://uat-platform.bankkaro.com/partner"
# Placeholder for the shared UAT key; real deployments set PARTNER_API_KEY.
DEFAULT_API_KEY = "uat-partner-api-key"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_REQUEST_TIMEOUT = 15.0

logger = get_logger(__name__)

_warned_fallbacks: set[str] = set()


def _config_dir() -> Path:
    path = Path(user_config_dir(APP_NAME, roaming=True))
    path.mkdir(parents=True, exist_ok=True)
    return path


def _cache_dir() -> Path:
    path = Path(user_cache_dir(APP_NAME))
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_dir() -> Path:
    return _config_dir()


def cache_dir() -> Path:
    return _cache_dir()


def log_dir() -> Path:
    path = cache_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass(slots=True)
class Settings:
    """Token service and partner API configuration."""

    token_url: str = DEFAULT_TOKEN_URL
    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_BASE_URL
    environment: str = DEFAULT_ENVIRONMENT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == PRODUCTION_ENVIRONMENT

    @property
    def uses_default_api_key(self) -> bool:
        return self.api_key == DEFAULT_API_KEY


class SettingsManager:
    """Load settings from the environment, falling back to baked-in defaults.

    ``strict=True`` refuses the fallbacks for the token URL, API key and base
    URL and raises :class:`ConfigurationError` instead.
    """

    def __init__(self, env_file: Path | None = None, *, strict: bool = False) -> None:
        self._env_file = env_file
        self._strict = strict

    @property
    def env_file(self) -> Path:
        if self._env_file is not None:
            return self._env_file
        return config_dir() / ENV_FILE_NAME

    def load(self) -> Settings:
        load_dotenv(self.env_file, override=False)

        environment = self._get_env("ENVIRONMENT") or DEFAULT_ENVIRONMENT
        settings = Settings(
            token_url=self._required("TOKEN_URL", DEFAULT_TOKEN_URL, environment),
            api_key=self._required("API_KEY", DEFAULT_API_KEY, environment),
            base_url=self._required("BASE_URL", DEFAULT_BASE_URL, environment),
            environment=environment,
            request_timeout=self._get_timeout(),
        )
        return settings

    def _required(self, name: str, default: str, environment: str) -> str:
        value = self._get_env(name)
        if value:
            return value
        if self._strict:
            raise ConfigurationError(f"{ENV_PREFIX}{name} must be set")
        if environment.strip().lower() != PRODUCTION_ENVIRONMENT:
            _warn_fallback_once(f"{ENV_PREFIX}{name}")
        return default

    def _get_timeout(self) -> float:
        raw = self._get_env("REQUEST_TIMEOUT")
        if not raw:
            return DEFAULT_REQUEST_TIMEOUT
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"{ENV_PREFIX}REQUEST_TIMEOUT must be a number, got {raw!r}"
            ) from exc
        if timeout <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}REQUEST_TIMEOUT must be positive")
        return timeout

    def _get_env(self, name: str) -> str | None:
        value = os.getenv(f"{ENV_PREFIX}{name}")
        return value.strip() if value and value.strip() else None


def _warn_fallback_once(variable: str) -> None:
    if variable in _warned_fallbacks:
        return
    _warned_fallbacks.add(variable)
    logger.warning(
        "Configuration missing; using built-in default",
        variable=variable,
    )


__all__ = [
    "APP_NAME",
    "DEFAULT_API_KEY",
    "DEFAULT_BASE_URL",
    "DEFAULT_TOKEN_URL",
    "ENV_PREFIX",
    "Settings",
    "SettingsManager",
    "cache_dir",
    "config_dir",
    "log_dir",
]
