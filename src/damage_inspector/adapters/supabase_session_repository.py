"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from damage_inspector.domain.sessions import Session
from damage_inspector.services.sessions import SessionRepository

_COLUMNS = "id, created_at, last_activity, expires_at"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for sessions."""

    client: Client
    table_prefix: str = ""

    @property
    def table_name(self) -> str:
        return f"{self.table_prefix}sessions"

    def create_session(self, session: Session) -> Session:
        """Insert a session row and return it."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "id": session.id,
                    "created_at": session.created_at.isoformat(),
                    "last_activity": session.last_activity.isoformat(),
                    "expires_at": session.expires_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_row(response.data[0])

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def touch_session(
        self, session_id: str, last_activity: datetime, expires_at: datetime
    ) -> Session | None:
        """Refresh activity and expiry timestamps."""
        response = (
            self.client.table(self.table_name)
            .update(
                {
                    "last_activity": last_activity.isoformat(),
                    "expires_at": expires_at.isoformat(),
                }
            )
            .eq("id", session_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        self.client.table(self.table_name).delete().eq("id", session_id).execute()


def _parse_row(row: dict[str, object]) -> Session:
    return Session(
        id=str(row["id"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        last_activity=datetime.fromisoformat(str(row["last_activity"])),
        expires_at=datetime.fromisoformat(str(row["expires_at"])),
    )
