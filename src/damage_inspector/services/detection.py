"""Damage detector contract and result normalization."""

from typing import Protocol

from damage_inspector.domain.detection import DetectionResult
from damage_inspector.domain.images import BoundingBox, Damage, severity_for_confidence

DAMAGE_TYPE = "crack"
DAMAGE_LOCATION = "detected"


class DamageDetector(Protocol):
    """Interface for the remote damage detection service."""

    async def detect(self, image_bytes: bytes, content_type: str) -> DetectionResult:
        """Send an image to the detector and return its normalized result."""

    async def health(self) -> bool:
        """Return true when the detector answers its health check."""


def damages_from_detection(result: DetectionResult) -> list[Damage]:
    """Map a detector result to at most one normalized damage entry."""
    if not result.has_damage:
        return []
    box = None
    if result.bounding_boxes:
        first = result.bounding_boxes[0]
        box = BoundingBox(x=first.x, y=first.y, width=first.width, height=first.height)
    return [
        Damage(
            type=DAMAGE_TYPE,
            severity=severity_for_confidence(result.confidence),
            location=DAMAGE_LOCATION,
            confidence=result.confidence,
            bounding_box=box,
        )
    ]


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
