"""Sharing completed damage reports."""

import base64
from dataclasses import dataclass

from damage_inspector.domain.images import AnalysisStatus, Image
from damage_inspector.errors import ValidationError
from damage_inspector.services.images import ImageService
from damage_inspector.services.reports import ReportRenderer, report_filename


@dataclass(frozen=True)
class SharedReport:
    """Base64-encoded PDF ready for download."""

    pdf_base64: str
    filename: str


@dataclass
class ShareService:
    """Produces PDF reports and share-card metadata for analysed images."""

    image_service: ImageService
    renderer: ReportRenderer
    web_url: str

    def generate_report(self, image_id: str) -> SharedReport:
        """Render the report of a completed image as base64."""
        image = self.image_service.get(image_id)
        pdf = self.renderer.render(image)
        return SharedReport(
            pdf_base64=base64.b64encode(pdf).decode("ascii"),
            filename=report_filename(image.id),
        )

    def share_metadata(self, image_id: str) -> dict[str, object]:
        """Return link preview data for a completed image."""
        image = self.image_service.get(image_id)
        _require_completed(image)
        link = f"{self.web_url.rstrip('/')}/report/{image.id}"
        count = len(image.analysis.damages)
        return {
            "title": self.renderer.title,
            "description": f"{count} damage(s) detected.",
            "imageUrl": image.processed_image_url or image.image_url,
            "link": {"webUrl": link, "mobileWebUrl": link},
        }


def _require_completed(image: Image) -> None:
    if image.analysis.status is not AnalysisStatus.COMPLETED:
        raise ValidationError("Image analysis not completed yet")
