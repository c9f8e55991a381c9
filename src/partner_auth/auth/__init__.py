"""Credential caching and authenticated requests for the partner API."""

from .types import Credential
from .single_flight import SingleFlight
from .credential_client import PARTNER_TOKEN_HEADER, CredentialClient, CredentialStats

__all__ = [
    "Credential",
    "SingleFlight",
    "CredentialClient",
    "CredentialStats",
    "PARTNER_TOKEN_HEADER",
]
