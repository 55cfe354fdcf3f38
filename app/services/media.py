"""
Cloudinary client for profile images (company logos, employee avatars and backgrounds).

Uploads and destroys images through the Cloudinary SDK. Upload failures
propagate to the caller; deletions are best-effort through delete_quietly().
"""

import io
import re
import secrets
import time
from typing import Any, Dict, NamedTuple, Optional
import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from app.core.config import settings
from app.core.exceptions import ValidationFailed
from app.core.logging_config import logger


ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

ALLOWED_FORMATS = ["jpg", "jpeg", "png", "gif", "webp"]

# Target folder per upload field
FOLDERS = {
    "logo": "companies/logos",
    "avatar": "employees/avatars",
    "background": "employees/backgrounds",
}


class MediaHostError(Exception):
    """Raised when the media host rejects or fails a request."""


class ImageUpload(NamedTuple):
    """An image received in a request, before it is sent to the media host."""
    content: bytes
    filename: str
    content_type: Optional[str]


def validate_image(content: bytes, content_type: Optional[str], max_bytes: Optional[int] = None) -> None:
    """
    Reject anything that is not a supported image within the size limit.

    Raises:
        ValidationFailed: With a field-level error for the file
    """
    max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
    if not content_type or content_type.lower() not in ALLOWED_IMAGE_TYPES:
        raise ValidationFailed(
            "Only images are allowed",
            errors=[{"field": "file", "message": "Allowed formats: jpg, jpeg, png, gif, webp"}],
        )
    if not content:
        raise ValidationFailed("Empty file", errors=[{"field": "file", "message": "File is empty"}])
    if len(content) > max_bytes:
        raise ValidationFailed(
            "File too large",
            errors=[{"field": "file", "message": f"Maximum size is {max_bytes} bytes"}],
        )


def public_id_from_url(image_url: str) -> Optional[str]:
    """
    Recover the Cloudinary public id from a delivery URL.

    https://res.cloudinary.com/<cloud>/image/upload/[<transformations>/][v<version>/]<folder>/<name>.<ext>
    -> "<folder>/<name>"

    Returns None for URLs that are not Cloudinary upload URLs.
    """
    parts = image_url.split("?")[0].split("/")
    if "upload" not in parts:
        return None
    after_upload = parts[parts.index("upload") + 1:]
    if not after_upload or not after_upload[-1]:
        return None

    name = after_upload[-1].rsplit(".", 1)[0]
    folders = [
        part for part in after_upload[:-1]
        if not re.match(r"^v\d+$", part) and "," not in part and "=" not in part
    ]
    return "/".join(folders + [name])


class MediaHost:
    """Interface of the media host collaborator."""

    def upload(self, content: bytes, *, filename: str, content_type: str, field: str) -> str:
        raise NotImplementedError

    def delete(self, image_url: str) -> None:
        raise NotImplementedError


class CloudinaryMediaHost(MediaHost):
    """Media host backed by the Cloudinary SDK."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        root_folder: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the Cloudinary client.

        Args:
            cloud_name: Cloudinary cloud name (defaults to settings)
            api_key: API key (defaults to settings)
            api_secret: API secret used to sign requests (defaults to settings)
            root_folder: Folder all uploads are placed under
            timeout: HTTP timeout in seconds
        """
        default_cloud, default_key, default_secret = settings.cloudinary_credentials
        self.cloud_name = cloud_name or default_cloud
        self.api_key = api_key or default_key
        self.api_secret = api_secret or default_secret
        self.root_folder = root_folder or settings.MEDIA_ROOT_FOLDER
        self.timeout = timeout or settings.MEDIA_TIMEOUT_SECONDS
        if not self.configured:
            logger.warning("Cloudinary credentials not set. Image uploads will fail.")

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _options(self) -> Dict[str, Any]:
        # Passed per call so the SDK's global config is never mutated
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "timeout": self.timeout,
        }

    def folder_for(self, field: str) -> str:
        return f"{self.root_folder}/{FOLDERS.get(field, '')}".rstrip("/")

    def upload(self, content: bytes, *, filename: str, content_type: str, field: str) -> str:
        """
        Upload an image and return its HTTPS delivery URL.

        Raises:
            MediaHostError: If the host is not configured or the upload fails
        """
        if not self.configured:
            raise MediaHostError("Cloudinary is not configured")

        folder = self.folder_for(field)
        stream = io.BytesIO(content)
        stream.name = filename

        logger.info(f"Uploading {field} to Cloudinary: folder={folder}, size={len(content)}")
        try:
            result = cloudinary.uploader.upload(
                stream,
                folder=folder,
                public_id=f"{field}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}",
                resource_type="image",
                allowed_formats=ALLOWED_FORMATS,
                **self._options(),
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload error: {type(e).__name__}: {str(e)}")
            raise MediaHostError(f"Cloudinary upload failed: {str(e)}")

        image_url = result.get("secure_url") or result.get("url")
        if not image_url:
            logger.error(f"Cloudinary upload returned no URL: keys={list(result.keys())}")
            raise MediaHostError("Cloudinary upload returned no URL")
        return image_url

    def delete(self, image_url: str) -> None:
        """
        Destroy the remote image behind a delivery URL.

        Local "/uploads/" paths from the old storage scheme are ignored.

        Raises:
            MediaHostError: If the destroy call fails
        """
        if not image_url or image_url.startswith("/uploads/"):
            return

        public_id = public_id_from_url(image_url)
        if not public_id:
            logger.warning(f"Not a Cloudinary upload URL, skipping delete: {image_url}")
            return
        if not self.configured:
            raise MediaHostError("Cloudinary is not configured")

        try:
            result = cloudinary.uploader.destroy(public_id, resource_type="image", **self._options())
        except cloudinary.exceptions.Error as e:
            raise MediaHostError(f"Cloudinary destroy failed for {public_id}: {str(e)}")

        if result.get("result") != "ok":
            logger.warning(f"Cloudinary destroy for {public_id} returned {result.get('result')}")
        else:
            logger.info(f"Cloudinary image deleted: {public_id}")


def delete_quietly(media_host: MediaHost, image_url: Optional[str]) -> None:
    """
    Best-effort removal of a replaced or orphaned image.

    The database record is the source of truth, so a failed delete is
    logged and never fails the owning request.
    """
    if not image_url:
        return
    try:
        media_host.delete(image_url)
    except Exception as e:
        logger.error(f"Could not delete image {image_url}: {type(e).__name__}: {str(e)}")


media_host = CloudinaryMediaHost()


def get_media_host() -> MediaHost:
    """FastAPI dependency returning the configured media host."""
    return media_host
