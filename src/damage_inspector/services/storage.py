"""Object storage contract for image payloads."""

from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

DEFAULT_EXTENSION = "jpg"


@dataclass(frozen=True)
class SignedUpload:
    """Capability for a client to upload one object directly."""

    upload_url: str
    token: str | None
    object_key: str


class ObjectStorage(Protocol):
    """Operations the API needs from object storage."""

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under a key."""

    def download(self, key: str) -> bytes:
        """Return the bytes stored under a key."""

    def delete(self, key: str) -> None:
        """Remove a stored object."""

    def create_upload_url(self, key: str) -> SignedUpload:
        """Return a time-limited URL for a client-side upload."""

    def signed_url(self, key: str, expires_in: int) -> str:
        """Return a time-limited download URL."""

    def public_url(self, key: str) -> str:
        """Return the public URL of an object."""

    def resolve_url(self, key: str) -> str:
        """Return the URL clients should use to read an object."""


def build_object_key(session_id: str, filename: str | None) -> str:
    """Build a unique object key grouped under the session."""
    extension = DEFAULT_EXTENSION
    if filename and "." in filename:
        candidate = filename.rsplit(".", maxsplit=1)[1].strip().lower()
        if candidate.isalnum():
            extension = candidate
    return f"{session_id}/{uuid4()}.{extension}"
