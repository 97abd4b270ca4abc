"""Report download and share-card endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

if TYPE_CHECKING:
    from damage_inspector.containers import AppContainer

router = APIRouter(prefix="/api/share", tags=["share"])


@router.post("/generate/{image_id}")
async def generate_report(image_id: str, request: Request) -> dict[str, object]:
    """Render the PDF report of a completed analysis as base64."""
    container: AppContainer = request.app.state.container
    report = container.share_service.generate_report(image_id)
    return {"success": True, "pdf": report.pdf_base64, "filename": report.filename}


@router.post("/metadata/{image_id}")
async def share_metadata(image_id: str, request: Request) -> dict[str, object]:
    """Return link preview data for sharing a report."""
    container: AppContainer = request.app.state.container
    return {
        "success": True,
        "shareData": container.share_service.share_metadata(image_id),
    }
