"""Authentication type definitions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple


class Credential(NamedTuple):
    """A partner token issued by the token endpoint."""

    token: str
    """The opaque token string sent in the ``partner-token`` header."""

    expires_at: datetime
    """Absolute, timezone-aware expiry instant."""

    def is_valid(self, now: datetime | None = None) -> bool:
        """True while the expiry instant is strictly after ``now``."""
        current = now or datetime.now(timezone.utc)
        return self.expires_at > current


__all__ = ["Credential"]
