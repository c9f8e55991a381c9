from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, Mapping

import httpx

from partner_auth.auth.single_flight import SingleFlight
from partner_auth.auth.types import Credential
from partner_auth.config.settings import Settings
from partner_auth.issuer.client import IssuerClient
from partner_auth.issuer.errors import (
    DownstreamRequestError,
    MalformedIssuerResponse,
    PartnerAPIError,
)
from partner_auth.utils import get_logger


logger = get_logger(__name__)

PARTNER_TOKEN_HEADER = "partner-token"
DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(slots=True)
class CredentialStats:
    hits: int = 0
    refreshes: int = 0
    failures: int = 0


class CredentialClient:
    """Caches the partner token and attaches it to outbound requests.

    One instance is built at application startup and shared by every caller
    that needs partner data. The cached credential is served until its expiry
    instant passes; refreshes are coalesced so concurrent callers share a
    single token request.

    A credential handed out by :meth:`get_credential` may still cross its
    expiry before the caller's request is sent. That window is bounded by the
    token lifetime and is accepted.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )
        self._issuer = IssuerClient(
            self._http_client,
            token_url=settings.token_url,
            api_key=settings.api_key,
        )
        self._credential: Credential | None = None
        self._refresh: SingleFlight[Credential] = SingleFlight("credential-refresh")
        self._stats = CredentialStats()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cached_credential(self) -> Credential | None:
        return self._credential

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh.in_flight

    @property
    def stats(self) -> CredentialStats:
        return CredentialStats(
            hits=self._stats.hits,
            refreshes=self._stats.refreshes,
            failures=self._stats.failures,
        )

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def get_credential(self) -> Credential:
        """Return a non-expired credential, refreshing it if necessary.

        Raises:
            IssuerUnreachable: the token service could not be reached or
                returned an error status.
            MalformedIssuerResponse: the token service answered without a
                usable token or expiry.
        """
        cached = self._credential
        if cached is not None and cached.is_valid(self._now()):
            self._stats.hits += 1
            return cached
        return await self._refresh.run(self._refresh_credential)

    async def authenticated_request(
        self,
        target: str | httpx.URL,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        content: bytes | str | None = None,
    ) -> httpx.Response:
        """Send ``method target`` with the partner token attached.

        The response is returned whatever its status. Credential failures are
        raised before anything is sent; transport errors from the downstream
        call propagate unchanged.
        """
        credential = await self.get_credential()

        request_headers = httpx.Headers(headers or {})
        request_headers[PARTNER_TOKEN_HEADER] = credential.token
        if "content-type" not in request_headers:
            request_headers["Content-Type"] = DEFAULT_CONTENT_TYPE

        return await self._http_client.request(
            method,
            target,
            headers=request_headers,
            params=params,
            json=json,
            content=content,
        )

    async def request_json(
        self,
        target: str | httpx.URL,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> Any:
        """Authenticated request that decodes JSON and rejects error statuses."""
        response = await self.authenticated_request(
            target,
            method=method,
            headers=headers,
            params=params,
            json=json,
        )
        if not response.is_success:
            logger.warning(
                "Partner API request failed",
                method=method.upper(),
                url=str(response.request.url),
                status_code=response.status_code,
            )
            raise DownstreamRequestError(
                f"Partner API request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.json()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "CredentialClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # Internal --------------------------------------------------------

    async def _refresh_credential(self) -> Credential:
        self._stats.refreshes += 1
        logger.debug("Refreshing partner token", token_url=self._issuer.token_url)
        try:
            credential = await self._issuer.fetch_credential()
        except PartnerAPIError as exc:
            self._stats.failures += 1
            logger.error(
                "Partner token refresh failed",
                category=exc.category.value,
                error=str(exc),
            )
            raise
        if not credential.is_valid(self._now()):
            self._stats.failures += 1
            logger.error(
                "Token service issued an already expired token",
                expires_at=credential.expires_at.isoformat(),
            )
            raise MalformedIssuerResponse("Token service issued an expired token")
        self._credential = credential
        return credential


__all__ = [
    "CredentialClient",
    "CredentialStats",
    "DEFAULT_CONTENT_TYPE",
    "PARTNER_TOKEN_HEADER",
]
