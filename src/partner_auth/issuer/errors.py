from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PartnerErrorCategory(str, Enum):
    NETWORK = "network"
    MALFORMED = "malformed"
    DOWNSTREAM = "downstream"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class PartnerAPIError(Exception):
    message: str
    category: PartnerErrorCategory = PartnerErrorCategory.UNKNOWN
    status_code: int | None = None
    inner_error: Exception | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    @property
    def recovery_suggestion(self) -> str | None:
        if self.category is PartnerErrorCategory.NETWORK:
            if self.status_code is not None:
                return "The token service rejected the request. Verify the partner API key and try again."
            return "Check your internet connection and try again."
        if self.category is PartnerErrorCategory.MALFORMED:
            return "The token service returned an unexpected response. Try again shortly."
        if self.category is PartnerErrorCategory.CONFIGURATION:
            return "Set PARTNER_TOKEN_URL and PARTNER_API_KEY in the environment."
        if self.category is PartnerErrorCategory.DOWNSTREAM:
            return "The partner API rejected the request. Review the request and retry."
        return None

    @property
    def is_retriable(self) -> bool:
        if self.category in {PartnerErrorCategory.NETWORK, PartnerErrorCategory.MALFORMED}:
            return True
        if self.status_code and 500 <= self.status_code <= 599:
            return True
        return False


class IssuerUnreachable(PartnerAPIError):
    def __init__(
        self,
        message: str = "Token service unreachable",
        *,
        status_code: int | None = None,
        inner_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            category=PartnerErrorCategory.NETWORK,
            status_code=status_code,
            inner_error=inner_error,
        )


class MalformedIssuerResponse(PartnerAPIError):
    def __init__(
        self,
        message: str = "Invalid token response",
        *,
        inner_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            category=PartnerErrorCategory.MALFORMED,
            inner_error=inner_error,
        )


class DownstreamRequestError(PartnerAPIError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            category=PartnerErrorCategory.DOWNSTREAM,
            status_code=status_code,
        )
        self.body = body


class ConfigurationError(PartnerAPIError):
    def __init__(self, message: str = "Partner configuration is incomplete") -> None:
        super().__init__(message=message, category=PartnerErrorCategory.CONFIGURATION)


__all__ = [
    "PartnerAPIError",
    "PartnerErrorCategory",
    "IssuerUnreachable",
    "MalformedIssuerResponse",
    "DownstreamRequestError",
    "ConfigurationError",
]
