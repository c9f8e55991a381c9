from __future__ import annotations

import asyncio

import httpx

from partner_auth.issuer.errors import (
    ConfigurationError,
    DownstreamRequestError,
    IssuerUnreachable,
    MalformedIssuerResponse,
)
from partner_auth.utils.errors import ErrorSeverity, describe_exception


def test_unreachable_issuer_is_transient_warning() -> None:
    descriptor = describe_exception(IssuerUnreachable(status_code=503))

    assert descriptor.headline == "Could not obtain a partner token."
    assert descriptor.detail.startswith("HTTP 503")
    assert descriptor.severity is ErrorSeverity.WARNING
    assert descriptor.transient
    assert descriptor.suggestion


def test_malformed_response_is_transient() -> None:
    descriptor = describe_exception(MalformedIssuerResponse())

    assert descriptor.transient
    assert descriptor.headline == "The token service returned an unusable response."


def test_configuration_error_is_not_transient() -> None:
    descriptor = describe_exception(ConfigurationError("PARTNER_API_KEY must be set"))

    assert not descriptor.transient
    assert descriptor.severity is ErrorSeverity.ERROR
    assert "PARTNER_API_KEY" in descriptor.detail


def test_downstream_server_error_is_retriable() -> None:
    descriptor = describe_exception(
        DownstreamRequestError("failed", status_code=502, body="")
    )

    assert descriptor.transient
    assert descriptor.headline == "The partner API request failed."


def test_wrapped_partner_error_is_located() -> None:
    try:
        try:
            raise IssuerUnreachable("down")
        except IssuerUnreachable as inner:
            raise RuntimeError("card list failed") from inner
    except RuntimeError as outer:
        descriptor = describe_exception(outer)

    assert descriptor.headline == "Could not obtain a partner token."


def test_httpx_timeout_is_transient() -> None:
    descriptor = describe_exception(httpx.ReadTimeout("slow"))

    assert descriptor.transient
    assert descriptor.severity is ErrorSeverity.WARNING


def test_asyncio_timeout_is_transient() -> None:
    descriptor = describe_exception(asyncio.TimeoutError())

    assert descriptor.transient


def test_unknown_error_uses_generic_descriptor() -> None:
    descriptor = describe_exception(KeyError("card"))

    assert descriptor.headline == "Operation failed."
    assert not descriptor.transient
