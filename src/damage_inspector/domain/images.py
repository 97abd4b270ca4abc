"""Domain models for uploaded images and their damage analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

HIGH_SEVERITY_THRESHOLD = 0.8
MEDIUM_SEVERITY_THRESHOLD = 0.5


class AnalysisStatus(str, Enum):
    """Lifecycle states of an image analysis."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[AnalysisStatus, set[AnalysisStatus]] = {
    AnalysisStatus.PENDING: {AnalysisStatus.PROCESSING},
    AnalysisStatus.PROCESSING: {AnalysisStatus.COMPLETED, AnalysisStatus.FAILED},
    AnalysisStatus.COMPLETED: set(),
    AnalysisStatus.FAILED: set(),
}


def can_transition(current: AnalysisStatus, target: AnalysisStatus) -> bool:
    """Return true when the status may move from current to target."""
    return target in _TRANSITIONS[current]


@dataclass(frozen=True)
class BoundingBox:
    """Pixel region of a detected damage."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Damage:
    """One normalized detection result."""

    type: str
    severity: str
    location: str
    confidence: float
    bounding_box: BoundingBox | None = None


@dataclass(frozen=True)
class DamageAnalysis:
    """Analysis state stored with an image."""

    status: AnalysisStatus
    damages: list[Damage] = field(default_factory=list)
    processed_at: datetime | None = None


@dataclass(frozen=True)
class Image:
    """Represents an uploaded image record."""

    id: str
    session_id: str
    image_url: str
    object_key: str
    analysis: DamageAnalysis
    created_at: datetime
    processed_image_url: str | None = None


def severity_for_confidence(confidence: float) -> str:
    """Bucket a detector confidence into a severity label."""
    if confidence > HIGH_SEVERITY_THRESHOLD:
        return "high"
    if confidence > MEDIUM_SEVERITY_THRESHOLD:
        return "medium"
    return "low"
