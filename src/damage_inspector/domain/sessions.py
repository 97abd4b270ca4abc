"""Domain models for client sessions."""

from dataclasses import dataclass
from datetime import datetime, timedelta

SESSION_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class Session:
    """Represents an anonymous client session."""

    id: str
    created_at: datetime
    last_activity: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return true once the expiry timestamp has passed."""
        return now >= self.expires_at
