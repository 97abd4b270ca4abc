"""Models for damage detector results."""

from pydantic import AliasChoices, BaseModel, Field


class DetectedBox(BaseModel):
    """Bounding box as reported by the detector."""

    x: float
    y: float
    width: float
    height: float


class DetectorPayload(BaseModel):
    """Raw JSON body returned by the detector."""

    image_url: str | None = None
    has_damage: bool | None = Field(
        default=None, validation_alias=AliasChoices("has_damage", "has_crack")
    )
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    bounding_boxes: list[DetectedBox] = Field(default_factory=list)


class DetectionResult(BaseModel):
    """Normalized detector output."""

    processed_image_url: str | None = None
    has_damage: bool
    confidence: float = Field(ge=0.0, le=1.0)
    bounding_boxes: list[DetectedBox] = Field(default_factory=list)
