"""Survey endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from damage_inspector.api.schemas import SurveySubmitRequest
from damage_inspector.api.views import survey_response_view, survey_stats_view

if TYPE_CHECKING:
    from damage_inspector.containers import AppContainer

router = APIRouter(prefix="/api/survey", tags=["survey"])


@router.post("/submit", status_code=status.HTTP_201_CREATED)
async def submit_survey(
    body: SurveySubmitRequest, request: Request
) -> dict[str, object]:
    """Store one survey answer."""
    container: AppContainer = request.app.state.container
    record = container.survey_service.submit(
        body.session_id, body.response, body.additional_comments
    )
    return {
        "success": True,
        "message": "Survey response submitted",
        "responseId": record.id,
    }


@router.get("/results")
async def survey_results(request: Request) -> dict[str, object]:
    """Return answer counts and every response."""
    container: AppContainer = request.app.state.container
    results = container.survey_service.results()
    return {
        "success": True,
        "stats": survey_stats_view(results.stats),
        "responses": [survey_response_view(item) for item in results.responses],
    }


@router.get("/session/{session_id}")
async def session_responses(session_id: str, request: Request) -> dict[str, object]:
    """Return one session's responses."""
    container: AppContainer = request.app.state.container
    responses = container.survey_service.list_by_session(session_id)
    return {
        "success": True,
        "count": len(responses),
        "responses": [survey_response_view(item) for item in responses],
    }
