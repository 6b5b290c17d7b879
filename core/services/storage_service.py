# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Blob store adapter. Uploads return the public URL of the stored object;
# that URL is the "file reference" persisted on project/developer rows.
# Deletion takes the same URLs back, maps them to object paths and reports a
# per-URL outcome instead of raising.
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Iterable
from urllib.parse import unquote, urlparse
from uuid import uuid4

from supabase import Client

from app.exceptions import StorageUploadError
from lib.slugs import slugify
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Path prefixes under which Supabase serves bucket objects
_OBJECT_URL_MARKERS = ("/storage/v1/object/public/", "/storage/v1/object/sign/")


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client, held in memory."""

    content: bytes
    filename: str
    content_type: str | None = None


@dataclass(frozen=True)
class BlobDeleteOutcome:
    """Result of deleting one referenced file."""

    url: str
    deleted: bool
    error: str | None = None


def build_object_path(folder: str, filename: str) -> str:
    """
    Build a collision-free object path for an upload.

    Example:
        build_object_path("hero-images", "Front View.JPG")
        # "hero-images/3f2a...c1-front-view.jpg"
    """
    stem, ext = os.path.splitext(os.path.basename(filename or ""))
    safe_stem = slugify(stem) or "file"
    safe_ext = ext.lower() if ext and len(ext) <= 10 else ""
    return f"{folder.strip('/')}/{uuid4().hex}-{safe_stem}{safe_ext}"


def path_from_url(bucket: str, url: str) -> str | None:
    """
    Recover the object path inside `bucket` from a public or signed URL.

    Returns None when the URL does not point into the bucket.

    Example:
        path_from_url("project-files",
                      "https://x.supabase.co/storage/v1/object/public/project-files/hero-images/a.jpg")
        # "hero-images/a.jpg"
    """
    if not url:
        return None

    path = urlparse(url).path
    for marker in _OBJECT_URL_MARKERS:
        prefix = f"{marker}{bucket}/"
        index = path.find(prefix)
        if index != -1:
            object_path = unquote(path[index + len(prefix):])
            return object_path or None
    return None


class StorageService:
    """
    Service for Supabase Storage operations.

    Example:
        storage = StorageService()
        url = storage.upload("project-files", "hero-images", data, "front.jpg", "image/jpeg")
        outcomes = storage.delete_by_urls("project-files", [url])
    """

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    def upload(
        self,
        bucket: str,
        folder: str,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> str:
        """
        Upload raw file content and return its public URL.

        Args:
            bucket: Storage bucket
            folder: Folder inside the bucket
            content: File bytes
            filename: Original filename (sanitized into the object name)
            content_type: MIME type

        Returns:
            Public URL of the stored object

        Raises:
            StorageUploadError: If upload fails
        """
        path = build_object_path(folder, filename)

        try:
            storage = self.client.storage.from_(bucket)
            storage.upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type or DEFAULT_CONTENT_TYPE,
                    "upsert": "false",
                },
            )
            url = storage.get_public_url(path)

        except Exception as e:
            logger.error(f"Storage upload failed for {bucket}/{path}: {e}")
            raise StorageUploadError(filename, str(e))

        logger.info(f"Uploaded file to storage: {bucket}/{path}")
        return url.rstrip("?")

    def upload_many(
        self,
        bucket: str,
        folder: str,
        files: Iterable[UploadedFile],
    ) -> list[str]:
        """
        Upload several files, stopping at the first failure.

        Raises:
            StorageUploadError: If any upload fails
        """
        return [
            self.upload(bucket, folder, f.content, f.filename, f.content_type)
            for f in files
        ]

    def delete_by_urls(
        self,
        bucket: str,
        urls: Iterable[str],
    ) -> list[BlobDeleteOutcome]:
        """
        Delete the objects behind `urls` in one batch.

        Never raises: failures are logged and reported per URL.

        Returns:
            One BlobDeleteOutcome per distinct URL, in input order
        """
        requested = list(dict.fromkeys(url for url in urls if url))
        outcomes: dict[str, BlobDeleteOutcome] = {}
        paths: dict[str, str] = {}

        for url in requested:
            path = path_from_url(bucket, url)
            if path is None:
                outcomes[url] = BlobDeleteOutcome(
                    url=url,
                    deleted=False,
                    error=f"URL is not an object of bucket '{bucket}'",
                )
            else:
                paths[url] = path

        if paths:
            try:
                response = self.client.storage.from_(bucket).remove(list(paths.values()))
                removed = {
                    item.get("name")
                    for item in (response or [])
                    if isinstance(item, dict)
                }
                for url, path in paths.items():
                    if path in removed:
                        outcomes[url] = BlobDeleteOutcome(url=url, deleted=True)
                    else:
                        outcomes[url] = BlobDeleteOutcome(
                            url=url,
                            deleted=False,
                            error="Object not found in storage",
                        )
                logger.info(f"Deleted {len(removed)} file(s) from storage bucket {bucket}")

            except Exception as e:
                logger.error(f"Failed to delete files from {bucket}: {e}")
                for url in paths:
                    outcomes[url] = BlobDeleteOutcome(url=url, deleted=False, error=str(e))

        return [outcomes[url] for url in requested]
