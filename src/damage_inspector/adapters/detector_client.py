"""HTTP client for the remote damage detection service."""

import logging
from dataclasses import dataclass

import httpx

from damage_inspector.domain.detection import DetectionResult, DetectorPayload
from damage_inspector.errors import (
    InferenceMalformedResponseError,
    InferenceRejectedError,
    InferenceUnreachableError,
)
from damage_inspector.services.detection import DamageDetector

logger = logging.getLogger(__name__)

DETECT_PATH = "/detect-crack"
HEALTH_PATH = "/health"
HEALTH_TIMEOUT_SECONDS = 5.0


@dataclass
class HttpxDamageDetector(DamageDetector):
    """Damage detector backed by an httpx session."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 60.0) -> "HttpxDamageDetector":
        """Create a detector client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def detect(self, image_bytes: bytes, content_type: str) -> DetectionResult:
        """Upload the image as multipart form data and parse the verdict."""
        url = f"{self.base_url}{DETECT_PATH}"
        extension = content_type.split("/")[-1] or "jpg"
        try:
            response = await self.http_client.post(
                url,
                files={"image": (f"image.{extension}", image_bytes, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Detector rejected image",
                extra={"status": exc.response.status_code},
            )
            raise InferenceRejectedError(
                exc.response.status_code, exc.response.reason_phrase
            ) from exc
        except httpx.TransportError as exc:
            raise InferenceUnreachableError(type(exc).__name__) from exc

        try:
            payload = DetectorPayload.model_validate(response.json())
        except ValueError as exc:
            raise InferenceMalformedResponseError("unreadable body") from exc
        if not payload.image_url:
            raise InferenceMalformedResponseError()

        return DetectionResult(
            processed_image_url=self._absolute_url(payload.image_url),
            has_damage=True if payload.has_damage is None else payload.has_damage,
            confidence=payload.confidence,
            bounding_boxes=payload.bounding_boxes,
        )

    async def health(self) -> bool:
        """Return true when the detector health endpoint answers 200."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}{HEALTH_PATH}", timeout=HEALTH_TIMEOUT_SECONDS
            )
        except httpx.HTTPError as exc:
            logger.warning("Detector health check failed: %s", exc)
            return False
        return response.status_code == httpx.codes.OK

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _absolute_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"
