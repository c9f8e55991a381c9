from __future__ import annotations

import json
import time

import httpx
from pydantic import ValidationError

from partner_auth.auth.types import Credential
from partner_auth.issuer.errors import IssuerUnreachable, MalformedIssuerResponse
from partner_auth.issuer.models import TokenResponse
from partner_auth.utils import get_logger


logger = get_logger(__name__)

API_KEY_FIELD = "x-api-key"


class IssuerClient:
    """Exchanges the shared partner API key for a short-lived partner token."""

    def __init__(self, http_client: httpx.AsyncClient, token_url: str, api_key: str) -> None:
        self._http = http_client
        self._token_url = token_url
        self._api_key = api_key

    @property
    def token_url(self) -> str:
        return self._token_url

    async def fetch_credential(self) -> Credential:
        """POST the API key to the token endpoint and parse the issued token.

        Raises:
            IssuerUnreachable: transport failure, timeout or non-success status.
            MalformedIssuerResponse: the body lacks a usable token or expiry.
        """
        start = time.perf_counter()
        try:
            response = await self._http.post(
                self._token_url,
                json={API_KEY_FIELD: self._api_key},
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as exc:
            logger.error("Timed out requesting partner token", url=self._token_url)
            raise IssuerUnreachable(
                "Timed out contacting the token service",
                inner_error=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.error(
                "Network error requesting partner token",
                url=self._token_url,
                error=str(exc),
            )
            raise IssuerUnreachable(
                f"Network error contacting the token service: {exc}",
                inner_error=exc,
            ) from exc

        duration_ms = (time.perf_counter() - start) * 1000
        if not response.is_success:
            logger.error(
                "Token service returned an error status",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            )
            raise IssuerUnreachable(
                f"Failed to fetch auth token (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        credential = _parse_token_response(response)
        logger.info(
            "Partner token issued",
            expires_at=credential.expires_at.isoformat(),
            duration_ms=round(duration_ms, 1),
        )
        return credential


def _parse_token_response(response: httpx.Response) -> Credential:
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Token service returned a non-JSON body")
        raise MalformedIssuerResponse(
            "Token service returned a non-JSON body",
            inner_error=exc,
        ) from exc

    try:
        parsed = TokenResponse.model_validate(payload)
    except ValidationError as exc:
        logger.error(
            "Token service response failed validation",
            errors=exc.error_count(),
        )
        raise MalformedIssuerResponse(
            "Invalid token response: missing token or expiry",
            inner_error=exc,
        ) from exc

    if not parsed.succeeded or parsed.data is None:
        logger.error("Token service reported failure", status=parsed.status)
        raise MalformedIssuerResponse(
            f"Invalid token response (status={parsed.status!r})",
        )
    return parsed.data.to_credential()


__all__ = ["API_KEY_FIELD", "IssuerClient"]
