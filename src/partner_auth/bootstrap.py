from __future__ import annotations

from pathlib import Path

from partner_auth.auth import CredentialClient
from partner_auth.config import Settings, SettingsManager
from partner_auth.utils import get_logger


logger = get_logger(__name__)


def build_credential_client(
    settings: Settings | None = None,
    *,
    env_file: Path | None = None,
    strict: bool = False,
) -> CredentialClient:
    """Construct the shared credential client for the application.

    Call once during startup and hand the returned instance to every
    component that talks to the partner API. Close it with ``aclose()`` (or
    use it as an async context manager) on shutdown.
    """
    if settings is None:
        settings = SettingsManager(env_file, strict=strict).load()

    if settings.uses_default_api_key and settings.is_production:
        logger.warning("Production environment is using the built-in API key")

    client = CredentialClient(settings)
    logger.info(
        "Credential client initialised",
        token_url=settings.token_url,
        base_url=settings.base_url,
        environment=settings.environment,
    )
    return client


__all__ = ["build_credential_client"]
