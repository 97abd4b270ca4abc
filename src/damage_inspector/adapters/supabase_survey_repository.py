"""Supabase-backed survey response repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from damage_inspector.domain.surveys import SurveyAnswer, SurveyResponse
from damage_inspector.services.surveys import SurveyRepository

_COLUMNS = "id, session_id, response, additional_comments, created_at"


@dataclass
class SupabaseSurveyRepository(SurveyRepository):
    """Supabase implementation for survey responses."""

    client: Client
    table_prefix: str = ""

    @property
    def table_name(self) -> str:
        return f"{self.table_prefix}survey_responses"

    def create_response(self, response: SurveyResponse) -> SurveyResponse:
        """Insert a survey response row and return it."""
        result = (
            self.client.table(self.table_name)
            .insert(
                {
                    "id": response.id,
                    "session_id": response.session_id,
                    "response": response.response.value,
                    "additional_comments": response.additional_comments,
                    "created_at": response.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not result.data:
            raise RuntimeError("Failed to create survey response")
        return _parse_row(result.data[0])

    def get_response(self, response_id: str) -> SurveyResponse | None:
        """Return a survey response by id, if present."""
        result = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", response_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return _parse_row(result.data[0])

    def list_responses(self) -> list[SurveyResponse]:
        """Return every survey response."""
        result = self.client.table(self.table_name).select(_COLUMNS).execute()
        return [_parse_row(row) for row in result.data or []]

    def list_responses_by_session(self, session_id: str) -> list[SurveyResponse]:
        """Return the responses of one session."""
        result = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("session_id", session_id)
            .execute()
        )
        return [_parse_row(row) for row in result.data or []]

    def delete_response(self, response_id: str) -> None:
        """Delete a survey response row."""
        self.client.table(self.table_name).delete().eq("id", response_id).execute()


def _parse_row(row: dict[str, object]) -> SurveyResponse:
    return SurveyResponse(
        id=str(row["id"]),
        session_id=str(row["session_id"]),
        response=SurveyAnswer(row["response"]),
        additional_comments=row.get("additional_comments") or None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
