"""Domain models for survey responses."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SurveyAnswer(str, Enum):
    """Fixed answers to the helpfulness survey."""

    VERY_HELPFUL = "very_helpful"
    HELPFUL = "helpful"
    NEUTRAL = "neutral"
    NOT_HELPFUL = "not_helpful"
    NOT_AT_ALL_HELPFUL = "not_at_all_helpful"


@dataclass(frozen=True)
class SurveyResponse:
    """An immutable survey submission."""

    id: str
    session_id: str
    response: SurveyAnswer
    created_at: datetime
    additional_comments: str | None = None
