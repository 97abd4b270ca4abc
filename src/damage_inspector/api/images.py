"""Image upload, lookup and analysis endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from damage_inspector.api.schemas import ConfirmUploadRequest, PresignUploadRequest
from damage_inspector.api.views import image_view, outcome_view

if TYPE_CHECKING:
    from damage_inspector.containers import AppContainer

router = APIRouter(prefix="/api/image", tags=["image"])


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    session_id: str | None = Form(default=None, alias="sessionId"),
    image: UploadFile | None = File(default=None),
) -> dict[str, object]:
    """Accept a multipart image and store it for analysis."""
    container: AppContainer = request.app.state.container
    data = await image.read() if image else None
    record = container.image_service.upload(
        session_id,
        image.filename if image else None,
        data,
        image.content_type if image else None,
    )
    return {
        "success": True,
        "message": "Image uploaded successfully",
        "imageId": record.id,
        "imageUrl": record.image_url,
    }


@router.post("/presign")
async def presign_upload(
    body: PresignUploadRequest, request: Request
) -> dict[str, object]:
    """Issue a pre-signed URL for a direct client upload."""
    container: AppContainer = request.app.state.container
    prepared = container.image_service.prepare_upload(
        body.session_id, body.filename, body.content_type
    )
    return {
        "success": True,
        "uploadUrl": prepared.upload_url,
        "token": prepared.token,
        "objectKey": prepared.object_key,
        "imageUrl": prepared.image_url,
    }


@router.post("/confirm", status_code=status.HTTP_201_CREATED)
async def confirm_upload(
    body: ConfirmUploadRequest, request: Request
) -> dict[str, object]:
    """Record an object the client uploaded through a pre-signed URL."""
    container: AppContainer = request.app.state.container
    record = container.image_service.confirm_upload(
        body.session_id, body.object_key, body.image_url
    )
    return {
        "success": True,
        "message": "Upload confirmed",
        "imageId": record.id,
        "imageUrl": record.image_url,
    }


@router.post("/analyze/{image_id}")
async def analyze_image(image_id: str, request: Request) -> dict[str, object]:
    """Run damage detection for an image, at most once."""
    container: AppContainer = request.app.state.container
    outcome = await container.image_service.submit_for_analysis(image_id)
    return {"success": True, **outcome_view(outcome)}


@router.get("/session/{session_id}")
async def list_session_images(
    session_id: str, request: Request
) -> dict[str, object]:
    """Return a session's images, newest first."""
    container: AppContainer = request.app.state.container
    images = container.image_service.list_by_session(session_id)
    return {
        "success": True,
        "count": len(images),
        "images": [image_view(image) for image in images],
    }


@router.get("/{image_id}")
async def get_image(image_id: str, request: Request) -> dict[str, object]:
    """Return one image with its analysis."""
    container: AppContainer = request.app.state.container
    return {"success": True, "image": image_view(container.image_service.get(image_id))}


@router.delete("/{image_id}")
async def delete_image(image_id: str, request: Request) -> dict[str, object]:
    """Delete an image and its stored object."""
    container: AppContainer = request.app.state.container
    container.image_service.delete(image_id)
    return {"success": True, "message": "Image deleted"}
