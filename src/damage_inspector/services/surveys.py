"""Survey submission and aggregation."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from damage_inspector.domain.surveys import SurveyAnswer, SurveyResponse
from damage_inspector.errors import ValidationError


class SurveyRepository(Protocol):
    """Persistence interface for survey responses."""

    def create_response(self, response: SurveyResponse) -> SurveyResponse:
        """Store a survey response and return it."""

    def get_response(self, response_id: str) -> SurveyResponse | None:
        """Return a survey response by id, if present."""

    def list_responses(self) -> list[SurveyResponse]:
        """Return every stored survey response."""

    def list_responses_by_session(self, session_id: str) -> list[SurveyResponse]:
        """Return responses submitted from one session."""

    def delete_response(self, response_id: str) -> None:
        """Delete a survey response."""


@dataclass(frozen=True)
class SurveyStats:
    """Per-answer counts across all responses."""

    total: int
    breakdown: dict[str, int]


@dataclass(frozen=True)
class SurveyResults:
    """Aggregated stats plus the responses, newest first."""

    stats: SurveyStats
    responses: list[SurveyResponse]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SurveyService:
    """Validates and aggregates survey responses."""

    repository: SurveyRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def submit(
        self,
        session_id: str | None,
        response: str | None,
        additional_comments: str | None = None,
    ) -> SurveyResponse:
        """Validate and persist one response."""
        if not session_id or not response:
            raise ValidationError("sessionId and response are required")
        answer = parse_answer(response)
        record = SurveyResponse(
            id=str(uuid4()),
            session_id=session_id,
            response=answer,
            created_at=self.clock(),
            additional_comments=additional_comments or None,
        )
        return self.repository.create_response(record)

    def results(self) -> SurveyResults:
        """Return counts for every answer and all responses."""
        responses = sorted(
            self.repository.list_responses(),
            key=lambda item: item.created_at,
            reverse=True,
        )
        return SurveyResults(stats=aggregate(responses), responses=responses)

    def list_by_session(self, session_id: str) -> list[SurveyResponse]:
        """Return a session's responses, newest first."""
        return sorted(
            self.repository.list_responses_by_session(session_id),
            key=lambda item: item.created_at,
            reverse=True,
        )


def parse_answer(value: str) -> SurveyAnswer:
    """Convert a raw answer into the fixed enum."""
    try:
        return SurveyAnswer(value)
    except ValueError:
        allowed = ", ".join(answer.value for answer in SurveyAnswer)
        raise ValidationError(
            f"Invalid response '{value}'. Must be one of: {allowed}",
            field="response",
        ) from None


def aggregate(responses: list[SurveyResponse]) -> SurveyStats:
    """Count responses per answer, including answers nobody chose."""
    breakdown = {answer.value: 0 for answer in SurveyAnswer}
    for item in responses:
        breakdown[item.response.value] += 1
    return SurveyStats(total=len(responses), breakdown=breakdown)
