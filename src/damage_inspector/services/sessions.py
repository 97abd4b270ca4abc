"""Anonymous session bookkeeping."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from damage_inspector.domain.sessions import SESSION_TTL, Session
from damage_inspector.errors import NotFoundError


class SessionRepository(Protocol):
    """Persistence interface for sessions."""

    def create_session(self, session: Session) -> Session:
        """Store a new session and return it."""

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""

    def touch_session(
        self, session_id: str, last_activity: datetime, expires_at: datetime
    ) -> Session | None:
        """Update activity timestamps and return the stored session."""

    def delete_session(self, session_id: str) -> None:
        """Delete a session."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Creates sessions and keeps their expiry rolling on activity."""

    repository: SessionRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def create(self, session_id: str | None = None) -> Session:
        """Create a session, generating an id when none is supplied."""
        now = self.clock()
        session = Session(
            id=session_id or str(uuid4()),
            created_at=now,
            last_activity=now,
            expires_at=now + SESSION_TTL,
        )
        return self.repository.create_session(session)

    def get(self, session_id: str) -> Session | None:
        """Return a live session; expired sessions count as missing."""
        session = self.repository.get_session(session_id)
        if session is None or session.is_expired(self.clock()):
            return None
        return session

    def validate(self, session_id: str) -> Session:
        """Return a live session and extend its expiry."""
        session = self.get(session_id)
        if session is None:
            raise NotFoundError("session", session_id)
        now = self.clock()
        touched = self.repository.touch_session(
            session_id, last_activity=now, expires_at=now + SESSION_TTL
        )
        return touched or session

    def delete(self, session_id: str) -> None:
        """Delete a session explicitly."""
        self.repository.delete_session(session_id)
