"""Partner token service client and error types."""

from .errors import (
    ConfigurationError,
    DownstreamRequestError,
    IssuerUnreachable,
    MalformedIssuerResponse,
    PartnerAPIError,
    PartnerErrorCategory,
)
from .models import IssuedToken, TokenResponse
from .client import API_KEY_FIELD, IssuerClient

__all__ = [
    "API_KEY_FIELD",
    "IssuerClient",
    "IssuedToken",
    "TokenResponse",
    "PartnerAPIError",
    "PartnerErrorCategory",
    "IssuerUnreachable",
    "MalformedIssuerResponse",
    "DownstreamRequestError",
    "ConfigurationError",
]
