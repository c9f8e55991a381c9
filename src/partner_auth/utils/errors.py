from __future__ import annotations

import asyncio
import socket
from dataclasses import dataclass
from enum import Enum

import httpx

from partner_auth.issuer.errors import PartnerAPIError, PartnerErrorCategory


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ErrorDescriptor:
    headline: str
    detail: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    transient: bool = False
    suggestion: str | None = None


_NETWORK_ERRNOS = {
    getattr(socket, "EAI_AGAIN", None),
    getattr(socket, "EAI_FAIL", None),
    getattr(socket, "EAI_NONAME", None),
    getattr(socket, "EHOSTUNREACH", None),
    getattr(socket, "ENETDOWN", None),
    getattr(socket, "ENETUNREACH", None),
    getattr(socket, "ECONNREFUSED", None),
    getattr(socket, "ECONNRESET", None),
    getattr(socket, "ETIMEDOUT", None),
}
_NETWORK_ERRNOS.discard(None)


def describe_exception(error: Exception) -> ErrorDescriptor:
    """Summarise a failure so callers can render a degraded state."""
    descriptor = ErrorDescriptor(
        headline="Operation failed.",
        detail=f"{type(error).__name__}: {error}",
        severity=ErrorSeverity.ERROR,
        transient=False,
    )

    partner_error = _locate_partner_error(error)
    if partner_error is not None:
        descriptor.detail = _format_partner_detail(partner_error)
        descriptor.suggestion = partner_error.recovery_suggestion
        descriptor.transient = partner_error.is_retriable
        if partner_error.is_retriable:
            descriptor.severity = ErrorSeverity.WARNING
        descriptor.headline = _partner_headline(partner_error)
        return descriptor

    root = _unwrap_error(error)

    if isinstance(root, httpx.TimeoutException):
        descriptor.headline = "Temporary timeout contacting the partner API."
        descriptor.detail = f"{type(root).__name__}: {root}"
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Check your network connection and retry shortly."
        return descriptor

    if isinstance(root, asyncio.TimeoutError):
        descriptor.headline = "Operation timed out before the partner API responded."
        descriptor.detail = "asyncio.TimeoutError: Operation timed out"
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Retry the request after verifying connectivity."
        return descriptor

    if isinstance(root, httpx.RequestError):
        descriptor.headline = "Network issue contacting the partner API."
        descriptor.detail = f"{type(root).__name__}: {root}"
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Retry once your connection is stable."
        return descriptor

    if isinstance(root, OSError) and getattr(root, "errno", None) in _NETWORK_ERRNOS:
        descriptor.headline = "Network connection issue encountered."
        descriptor.detail = f"OSError[{root.errno}]: {root.strerror}"
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Retry once your connection is stable."
        return descriptor

    return descriptor


def _locate_partner_error(error: Exception) -> PartnerAPIError | None:
    current: BaseException | None = error
    visited: set[int] = set()
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        if isinstance(current, PartnerAPIError):
            return current
        current = current.__cause__ or current.__context__
    return None


def _unwrap_error(error: Exception) -> BaseException:
    current: BaseException = error
    visited: set[int] = set()
    while True:
        visited.add(id(current))
        inner = current.__cause__ or current.__context__
        if inner is None or id(inner) in visited:
            return current
        current = inner


def _partner_headline(error: PartnerAPIError) -> str:
    match error.category:
        case PartnerErrorCategory.NETWORK:
            return "Could not obtain a partner token."
        case PartnerErrorCategory.MALFORMED:
            return "The token service returned an unusable response."
        case PartnerErrorCategory.DOWNSTREAM:
            return "The partner API request failed."
        case PartnerErrorCategory.CONFIGURATION:
            return "Partner API configuration is incomplete."
        case _:
            return "Partner API request failed."


def _format_partner_detail(error: PartnerAPIError) -> str:
    if error.status_code is not None:
        return f"HTTP {error.status_code}: {error}"
    return str(error)


__all__ = [
    "ErrorDescriptor",
    "ErrorSeverity",
    "describe_exception",
]
