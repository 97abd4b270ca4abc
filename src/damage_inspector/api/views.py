"""JSON views of domain records."""

from datetime import datetime

from damage_inspector.domain.images import Damage, DamageAnalysis, Image
from damage_inspector.domain.surveys import SurveyResponse
from damage_inspector.services.images import AnalysisOutcome
from damage_inspector.services.surveys import SurveyStats


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def damage_view(damage: Damage) -> dict[str, object]:
    view: dict[str, object] = {
        "type": damage.type,
        "severity": damage.severity,
        "location": damage.location,
        "confidence": damage.confidence,
    }
    if damage.bounding_box:
        box = damage.bounding_box
        view["boundingBox"] = {
            "x": box.x,
            "y": box.y,
            "width": box.width,
            "height": box.height,
        }
    return view


def analysis_view(analysis: DamageAnalysis) -> dict[str, object]:
    view: dict[str, object] = {
        "status": analysis.status.value,
        "damages": [damage_view(damage) for damage in analysis.damages],
    }
    if analysis.processed_at:
        view["processedAt"] = _timestamp(analysis.processed_at)
    return view


def image_view(image: Image) -> dict[str, object]:
    return {
        "id": image.id,
        "sessionId": image.session_id,
        "imageUrl": image.image_url,
        "processedImageUrl": image.processed_image_url,
        "damageAnalysis": analysis_view(image.analysis),
        "createdAt": _timestamp(image.created_at),
    }


def outcome_view(outcome: AnalysisOutcome) -> dict[str, object]:
    view: dict[str, object] = {
        "imageId": outcome.image_id,
        "status": outcome.status.value,
        "damages": [damage_view(damage) for damage in outcome.damages],
    }
    if outcome.processed_image_url:
        view["processedImageUrl"] = outcome.processed_image_url
    return view


def survey_response_view(response: SurveyResponse) -> dict[str, object]:
    return {
        "responseId": response.id,
        "sessionId": response.session_id,
        "response": response.response.value,
        "additionalComments": response.additional_comments,
        "createdAt": _timestamp(response.created_at),
    }


def survey_stats_view(stats: SurveyStats) -> dict[str, object]:
    return {"total": stats.total, "breakdown": dict(stats.breakdown)}
