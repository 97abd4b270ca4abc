"""Image upload and damage analysis lifecycle.

An image record is the single source of truth for its analysis status. The
status only moves forward::

    pending -> processing -> completed
                          -> failed

Status writes are conditional on the expected prior status, so two concurrent
analysis requests for the same image cannot both reach the detector.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from damage_inspector.domain.images import (
    AnalysisStatus,
    Damage,
    DamageAnalysis,
    Image,
    can_transition,
)
from damage_inspector.errors import NotFoundError, ValidationError
from damage_inspector.services.detection import (
    DamageDetector,
    damages_from_detection,
    detect_mime_type,
)
from damage_inspector.services.storage import ObjectStorage, build_object_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ImageRepository(Protocol):
    """Persistence interface for image records."""

    def create_image(self, image: Image) -> Image:
        """Store a new image record and return it."""

    def get_image(self, image_id: str) -> Image | None:
        """Return an image by id, if present."""

    def list_images_by_session(self, session_id: str) -> list[Image]:
        """Return all images of a session in store order."""

    def update_image(self, image_id: str, processed_image_url: str) -> None:
        """Record the detector's processed image URL."""

    def transition_analysis(
        self, image_id: str, expected: AnalysisStatus, analysis: DamageAnalysis
    ) -> bool:
        """Write the analysis only if the stored status equals expected."""

    def delete_image(self, image_id: str) -> None:
        """Delete an image record."""


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result returned to callers of submit_for_analysis."""

    image_id: str
    status: AnalysisStatus
    damages: list[Damage]
    processed_image_url: str | None = None


@dataclass(frozen=True)
class PreparedUpload:
    """Pre-signed upload details handed to the client."""

    upload_url: str
    token: str | None
    object_key: str
    image_url: str


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ImageService:
    """Drives image records through upload and analysis."""

    repository: ImageRepository
    storage: ObjectStorage
    detector: DamageDetector
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    clock: Callable[[], datetime] = field(default=_utcnow)

    def upload(
        self,
        session_id: str | None,
        filename: str | None,
        data: bytes | None,
        content_type: str | None,
    ) -> Image:
        """Store image bytes directly and create a pending record."""
        if not session_id:
            raise ValidationError("Session ID is required", field="sessionId")
        if not data:
            raise ValidationError("Image file is required", field="image")
        _require_image_type(content_type)
        if len(data) > self.max_upload_bytes:
            raise ValidationError(
                f"Image exceeds the {self.max_upload_bytes} byte limit",
                field="image",
            )
        key = build_object_key(session_id, filename)
        self.storage.upload(key, data, content_type or "image/jpeg")
        return self.confirm_upload(session_id, key, self.storage.resolve_url(key))

    def prepare_upload(
        self,
        session_id: str | None,
        filename: str | None,
        content_type: str | None,
    ) -> PreparedUpload:
        """Issue a pre-signed URL so the client uploads bytes itself."""
        if not session_id:
            raise ValidationError("Session ID is required", field="sessionId")
        if not filename:
            raise ValidationError("Filename is required", field="filename")
        _require_image_type(content_type)
        key = build_object_key(session_id, filename)
        signed = self.storage.create_upload_url(key)
        return PreparedUpload(
            upload_url=signed.upload_url,
            token=signed.token,
            object_key=signed.object_key,
            image_url=self.storage.resolve_url(key),
        )

    def confirm_upload(
        self,
        session_id: str | None,
        object_key: str | None,
        image_url: str | None,
    ) -> Image:
        """Create a pending image record for an uploaded object."""
        for value, name in (
            (session_id, "sessionId"),
            (object_key, "objectKey"),
            (image_url, "imageUrl"),
        ):
            if not value:
                raise ValidationError(f"{name} is required", field=name)
        image = Image(
            id=str(uuid4()),
            session_id=str(session_id),
            image_url=str(image_url),
            object_key=str(object_key),
            analysis=DamageAnalysis(status=AnalysisStatus.PENDING, damages=[]),
            created_at=self.clock(),
        )
        return self.repository.create_image(image)

    async def submit_for_analysis(self, image_id: str) -> AnalysisOutcome:
        """Run the detector once for a pending image and persist the result."""
        image = self.get(image_id)
        if image.analysis.status is not AnalysisStatus.PENDING:
            return _outcome(image)

        claimed = self._transition(
            image_id,
            AnalysisStatus.PENDING,
            DamageAnalysis(status=AnalysisStatus.PROCESSING, damages=[]),
        )
        if not claimed:
            logger.info(
                "Analysis already claimed by another request",
                extra={"image_id": image_id},
            )
            return _outcome(self.get(image_id))

        try:
            image_bytes = self.storage.download(image.object_key)
            detection = await self.detector.detect(
                image_bytes, detect_mime_type(image_bytes)
            )
            damages = damages_from_detection(detection)
            if detection.processed_image_url:
                self.repository.update_image(image_id, detection.processed_image_url)
            stored = self._transition(
                image_id,
                AnalysisStatus.PROCESSING,
                DamageAnalysis(
                    status=AnalysisStatus.COMPLETED,
                    damages=damages,
                    processed_at=self.clock(),
                ),
            )
        except Exception:
            logger.exception("Damage analysis failed", extra={"image_id": image_id})
            self._transition(
                image_id,
                AnalysisStatus.PROCESSING,
                DamageAnalysis(status=AnalysisStatus.FAILED, damages=[]),
            )
            raise

        if not stored:
            logger.warning(
                "Completed analysis was not stored", extra={"image_id": image_id}
            )
            return _outcome(self.get(image_id))
        return AnalysisOutcome(
            image_id=image_id,
            status=AnalysisStatus.COMPLETED,
            damages=damages,
            processed_image_url=detection.processed_image_url,
        )

    def _transition(
        self, image_id: str, expected: AnalysisStatus, analysis: DamageAnalysis
    ) -> bool:
        if not can_transition(expected, analysis.status):
            raise ValueError(
                f"Invalid analysis transition {expected.value} -> "
                f"{analysis.status.value}"
            )
        return self.repository.transition_analysis(
            image_id, expected=expected, analysis=analysis
        )

    def get(self, image_id: str) -> Image:
        """Return an image or raise NotFoundError."""
        image = self.repository.get_image(image_id)
        if image is None:
            raise NotFoundError("image", image_id)
        return image

    def list_by_session(self, session_id: str) -> list[Image]:
        """Return a session's images, newest first."""
        images = self.repository.list_images_by_session(session_id)
        return sorted(images, key=lambda image: image.created_at, reverse=True)

    def delete(self, image_id: str) -> None:
        """Remove an image record and its stored object."""
        image = self.get(image_id)
        self.storage.delete(image.object_key)
        self.repository.delete_image(image_id)


def _require_image_type(content_type: str | None) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed", field="contentType")


def _outcome(image: Image) -> AnalysisOutcome:
    return AnalysisOutcome(
        image_id=image.id,
        status=image.analysis.status,
        damages=list(image.analysis.damages),
        processed_image_url=image.processed_image_url,
    )
