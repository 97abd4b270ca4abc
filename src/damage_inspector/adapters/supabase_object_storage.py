"""Supabase Storage adapter for image payloads."""

import logging
from dataclasses import dataclass

from supabase import Client

from damage_inspector.errors import StorageError
from damage_inspector.services.storage import ObjectStorage, SignedUpload

logger = logging.getLogger(__name__)


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Stores image bytes in a Supabase Storage bucket."""

    client: Client
    bucket: str
    public: bool = True
    signed_url_ttl_seconds: int = 3600

    def _bucket(self):  # type: ignore[no-untyped-def]
        return self.client.storage.from_(self.bucket)

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Upload bytes under the given key."""
        try:
            self._bucket().upload(key, data, {"content-type": content_type})
        except Exception as exc:
            logger.exception("Storage upload failed", extra={"object_key": key})
            raise StorageError("upload", str(exc)) from exc

    def download(self, key: str) -> bytes:
        """Download the bytes stored under the key."""
        try:
            return self._bucket().download(key)
        except Exception as exc:
            logger.exception("Storage download failed", extra={"object_key": key})
            raise StorageError("download", str(exc)) from exc

    def delete(self, key: str) -> None:
        """Remove an object from the bucket."""
        try:
            self._bucket().remove([key])
        except Exception as exc:
            logger.exception("Storage delete failed", extra={"object_key": key})
            raise StorageError("delete", str(exc)) from exc

    def create_upload_url(self, key: str) -> SignedUpload:
        """Create a signed URL the client can upload to directly."""
        try:
            response = self._bucket().create_signed_upload_url(key)
        except Exception as exc:
            logger.exception("Signed upload URL failed", extra={"object_key": key})
            raise StorageError("sign upload", str(exc)) from exc
        upload_url = response.get("signed_url") or response.get("signedUrl")
        if not upload_url:
            raise StorageError("sign upload", "no URL in response")
        return SignedUpload(
            upload_url=str(upload_url),
            token=response.get("token"),
            object_key=str(response.get("path") or key),
        )

    def signed_url(self, key: str, expires_in: int) -> str:
        """Create a time-limited download URL."""
        try:
            response = self._bucket().create_signed_url(key, expires_in)
        except Exception as exc:
            logger.exception("Signed URL failed", extra={"object_key": key})
            raise StorageError("sign download", str(exc)) from exc
        url = response.get("signedURL") or response.get("signedUrl")
        if not url:
            raise StorageError("sign download", "no URL in response")
        return str(url)

    def public_url(self, key: str) -> str:
        """Return the public URL of an object."""
        return str(self._bucket().get_public_url(key))

    def resolve_url(self, key: str) -> str:
        """Return a public URL for public buckets, otherwise a signed one."""
        if self.public:
            return self.public_url(key)
        return self.signed_url(key, self.signed_url_ttl_seconds)
