"""Cached Hostaway OAuth2 credential."""
from datetime import datetime, timedelta
from typing import Optional

import pytz
from pydantic import BaseModel, ConfigDict

# Hostaway tokens default to a one hour lifetime when expires_in is absent
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600


class AccessToken(BaseModel):
    """Bearer token plus its absolute expiry (UTC).

    Passed explicitly into fetch calls and replaced when expired; never held
    as module state.
    """
    token: str
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_response(cls, data: dict, now: Optional[datetime] = None) -> "AccessToken":
        """Build from an /accessTokens response body.

        Args:
            data: {"access_token": "...", "expires_in": 3600, ...}
            now: Issue time (defaults to current UTC time)
        """
        now = now or datetime.now(pytz.UTC)
        expires_in = data.get("expires_in") or DEFAULT_TOKEN_LIFETIME_SECONDS
        return cls(
            token=data["access_token"],
            expires_at=now + timedelta(seconds=int(expires_in)),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(pytz.UTC)
        return now >= self.expires_at
