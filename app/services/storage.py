"""
Object storage for vehicle images.

Objects are addressed by a bucket-relative path such as
``vehicles/<uuid>.jpg``. Backends return a public URL from ``upload`` and can
recover the path from that URL later, so the database only stores the URL.
Every backend signals failure by raising ``StorageError``.
"""

import logging
import os
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Optional

import cloudinary
import cloudinary.uploader

from app.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an upload or delete is refused by the storage backend."""


class ObjectStorage:
    """Interface shared by the storage backends."""

    def __init__(self, bucket: str):
        self.bucket = bucket

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store ``data`` under ``path`` and return its public URL."""
        raise NotImplementedError

    def delete(self, path: str) -> None:
        """Remove the object stored under ``path``."""
        raise NotImplementedError

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """Recover the bucket-relative path from a public URL."""
        if not url:
            return None
        marker = f"{self.bucket}/"
        if marker not in url:
            return None
        path = url.split(marker, 1)[1]
        return path or None


class LocalObjectStorage(ObjectStorage):
    """
    Keeps objects on the local filesystem under MEDIA_ROOT/<bucket>.
    The application serves MEDIA_ROOT as static files at MEDIA_URL.
    """

    def __init__(self, bucket: str, root: str, base_url: str):
        super().__init__(bucket)
        self.root = Path(root) / bucket
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Path escapes the bucket: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._resolve(path)
        if target.exists():
            raise StorageError(f"Object already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e)) from e
        return f"{self.base_url}/{self.bucket}/{path}"

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            os.remove(target)
        except OSError as e:
            raise StorageError(str(e)) from e


class CloudinaryObjectStorage(ObjectStorage):
    """
    Keeps objects in Cloudinary, using the bucket name as the folder.
    Cloudinary public ids carry no file extension, so it is stripped on the way in.
    """

    def __init__(self, bucket: str, cloud_name: str, api_key: str, api_secret: str):
        super().__init__(bucket)
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True  # Always use HTTPS
        )

    def _public_id(self, path: str) -> str:
        return f"{self.bucket}/{os.path.splitext(path)[0]}"

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            result = cloudinary.uploader.upload(
                data,
                public_id=self._public_id(path),
                resource_type="image",
                overwrite=False,  # Don't overwrite existing files
                invalidate=True,  # Invalidate CDN cache
            )
        except Exception as e:
            raise StorageError(str(e)) from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise StorageError("Cloudinary returned no URL")
        return url

    def delete(self, path: str) -> None:
        try:
            result = cloudinary.uploader.destroy(
                self._public_id(path), resource_type="image", invalidate=True
            )
        except Exception as e:
            raise StorageError(str(e)) from e
        if result.get("result") != "ok":
            raise StorageError(f"Cloudinary could not delete {path}: {result.get('result')}")


def build_object_path(filename: Optional[str], folder: str = "vehicles") -> str:
    """Fresh unique path for an uploaded file, keeping its extension."""
    extension = ""
    if filename and "." in filename:
        extension = "." + filename.rsplit(".", 1)[1].lower()
    return f"{folder}/{uuid.uuid4()}{extension}"


def create_storage() -> ObjectStorage:
    """Build the storage backend selected by STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "cloudinary":
        if not (settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY
                and settings.CLOUDINARY_API_SECRET):
            raise RuntimeError("Cloudinary storage requires CLOUDINARY_* settings")
        logger.info(f"Using Cloudinary storage for bucket '{settings.STORAGE_BUCKET}'")
        return CloudinaryObjectStorage(
            settings.STORAGE_BUCKET,
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
        )
    if backend == "local":
        logger.info(f"Using local storage at {settings.MEDIA_ROOT}/{settings.STORAGE_BUCKET}")
        return LocalObjectStorage(settings.STORAGE_BUCKET, settings.MEDIA_ROOT, settings.MEDIA_URL)
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")


@lru_cache
def get_storage() -> ObjectStorage:
    """Dependency returning the process-wide storage backend."""
    return create_storage()
