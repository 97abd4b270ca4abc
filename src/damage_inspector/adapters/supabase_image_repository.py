"""Supabase-backed image repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from damage_inspector.domain.images import (
    AnalysisStatus,
    BoundingBox,
    Damage,
    DamageAnalysis,
    Image,
)
from damage_inspector.services.images import ImageRepository

_COLUMNS = (
    "id, session_id, image_url, object_key, processed_image_url, "
    "analysis_status, damages_json, processed_at, created_at"
)


@dataclass
class SupabaseImageRepository(ImageRepository):
    """Supabase implementation for image records."""

    client: Client
    table_prefix: str = ""

    @property
    def table_name(self) -> str:
        return f"{self.table_prefix}images"

    def create_image(self, image: Image) -> Image:
        """Insert an image row and return it."""
        payload: dict[str, object] = {
            "id": image.id,
            "session_id": image.session_id,
            "image_url": image.image_url,
            "object_key": image.object_key,
            "processed_image_url": image.processed_image_url,
            "created_at": image.created_at.isoformat(),
        }
        payload.update(_analysis_payload(image.analysis))
        response = self.client.table(self.table_name).insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create image")
        return _parse_row(response.data[0])

    def get_image(self, image_id: str) -> Image | None:
        """Return an image by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", image_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_images_by_session(self, session_id: str) -> list[Image]:
        """Return all images for a session."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("session_id", session_id)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def update_image(self, image_id: str, processed_image_url: str) -> None:
        """Store the processed image URL."""
        self.client.table(self.table_name).update(
            {"processed_image_url": processed_image_url}
        ).eq("id", image_id).execute()

    def transition_analysis(
        self, image_id: str, expected: AnalysisStatus, analysis: DamageAnalysis
    ) -> bool:
        """Update the analysis only while the row still has the expected status."""
        response = (
            self.client.table(self.table_name)
            .update(_analysis_payload(analysis))
            .eq("id", image_id)
            .eq("analysis_status", expected.value)
            .execute()
        )
        return bool(response.data)

    def delete_image(self, image_id: str) -> None:
        """Delete an image row."""
        self.client.table(self.table_name).delete().eq("id", image_id).execute()


def _analysis_payload(analysis: DamageAnalysis) -> dict[str, object]:
    return {
        "analysis_status": analysis.status.value,
        "damages_json": [_damage_to_json(damage) for damage in analysis.damages],
        "processed_at": (
            analysis.processed_at.isoformat() if analysis.processed_at else None
        ),
    }


def _damage_to_json(damage: Damage) -> dict[str, object]:
    box = damage.bounding_box
    return {
        "type": damage.type,
        "severity": damage.severity,
        "location": damage.location,
        "confidence": damage.confidence,
        "bounding_box": (
            {"x": box.x, "y": box.y, "width": box.width, "height": box.height}
            if box
            else None
        ),
    }


def _damage_from_json(raw: dict[str, object]) -> Damage:
    box_raw = raw.get("bounding_box")
    box = None
    if isinstance(box_raw, dict):
        box = BoundingBox(
            x=float(box_raw.get("x", 0.0)),
            y=float(box_raw.get("y", 0.0)),
            width=float(box_raw.get("width", 0.0)),
            height=float(box_raw.get("height", 0.0)),
        )
    return Damage(
        type=str(raw.get("type", "")),
        severity=str(raw.get("severity", "")),
        location=str(raw.get("location", "")),
        confidence=float(raw.get("confidence", 0.0)),
        bounding_box=box,
    )


def _parse_row(row: dict[str, object]) -> Image:
    damages_raw = row.get("damages_json") or []
    processed_at_raw = row.get("processed_at")
    return Image(
        id=str(row["id"]),
        session_id=str(row["session_id"]),
        image_url=str(row["image_url"]),
        object_key=str(row["object_key"]),
        processed_image_url=row.get("processed_image_url") or None,
        analysis=DamageAnalysis(
            status=AnalysisStatus(row.get("analysis_status") or "pending"),
            damages=[
                _damage_from_json(item)
                for item in damages_raw
                if isinstance(item, dict)
            ],
            processed_at=(
                datetime.fromisoformat(processed_at_raw)
                if isinstance(processed_at_raw, str) and processed_at_raw
                else None
            ),
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
