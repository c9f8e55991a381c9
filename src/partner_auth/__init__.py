"""Client-side credential lifecycle for the partner platform API."""

from .auth import Credential, CredentialClient, CredentialStats, SingleFlight
from .bootstrap import build_credential_client
from .config import Settings, SettingsManager
from .issuer import (
    ConfigurationError,
    DownstreamRequestError,
    IssuerClient,
    IssuerUnreachable,
    MalformedIssuerResponse,
    PartnerAPIError,
    PartnerErrorCategory,
)

__all__ = [
    "Credential",
    "CredentialClient",
    "CredentialStats",
    "SingleFlight",
    "build_credential_client",
    "Settings",
    "SettingsManager",
    "IssuerClient",
    "PartnerAPIError",
    "PartnerErrorCategory",
    "IssuerUnreachable",
    "MalformedIssuerResponse",
    "DownstreamRequestError",
    "ConfigurationError",
]
