"""Session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from damage_inspector.api.schemas import CreateSessionRequest

if TYPE_CHECKING:
    from damage_inspector.containers import AppContainer
    from damage_inspector.domain.sessions import Session

router = APIRouter(prefix="/api/session", tags=["session"])


def _session_view(session: Session) -> dict[str, object]:
    return {
        "sessionId": session.id,
        "createdAt": session.created_at.isoformat(),
        "lastActivity": session.last_activity.isoformat(),
        "expiresAt": session.expires_at.isoformat(),
    }


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Request, body: CreateSessionRequest | None = None
) -> dict[str, object]:
    """Create a session, honouring a client-supplied id."""
    container: AppContainer = request.app.state.container
    session = container.session_service.create(body.session_id if body else None)
    return {"success": True, **_session_view(session)}


@router.get("/validate/{session_id}")
async def validate_session(session_id: str, request: Request) -> dict[str, object]:
    """Confirm a session is live and extend its expiry."""
    container: AppContainer = request.app.state.container
    session = container.session_service.validate(session_id)
    return {"success": True, "valid": True, **_session_view(session)}


@router.delete("/{session_id}")
async def delete_session(session_id: str, request: Request) -> dict[str, object]:
    """Delete a session."""
    container: AppContainer = request.app.state.container
    container.session_service.delete(session_id)
    return {"success": True, "message": "Session deleted"}
