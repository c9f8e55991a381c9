from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from partner_auth.auth.types import Credential


class IssuerBaseModel(BaseModel):
    """Base class for token service payloads."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class IssuedToken(IssuerBaseModel):
    jwttoken: str = Field(min_length=1)
    expires_at: datetime = Field(alias="expiresAt")

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_credential(self) -> Credential:
        return Credential(token=self.jwttoken, expires_at=self.expires_at)


class TokenResponse(IssuerBaseModel):
    """Envelope returned by ``POST /partner/token``."""

    status: str
    data: IssuedToken | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


__all__ = ["IssuedToken", "TokenResponse"]
