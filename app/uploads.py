# =============================================================================
# app/uploads.py - Multipart File Handling
# =============================================================================
# Reads FastAPI UploadFile objects into memory and enforces the configured
# size and count limits before anything reaches storage.
# =============================================================================

import logging

from fastapi import UploadFile

from app.config import settings
from app.exceptions import FileTooLargeError, TooManyFilesError
from core.services.storage_service import UploadedFile

logger = logging.getLogger(__name__)


async def read_upload(file: UploadFile) -> UploadedFile:
    """
    Read one uploaded file, enforcing MAX_UPLOAD_SIZE_MB.

    Raises:
        FileTooLargeError: If the file exceeds the size limit
    """
    filename = file.filename or "file"
    content = await file.read()

    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(
            filename,
            len(content) / (1024 * 1024),
            settings.MAX_UPLOAD_SIZE_MB,
        )

    logger.debug(f"Received upload {filename} ({len(content)} bytes)")
    return UploadedFile(
        content=content,
        filename=filename,
        content_type=file.content_type,
    )


async def read_uploads(field: str, files: list[UploadFile] | None) -> list[UploadedFile]:
    """
    Read every file of a multipart field, enforcing MAX_FILES_PER_FIELD.

    Empty parts (browsers send one when no file is chosen) are skipped.

    Raises:
        TooManyFilesError: If the field carries too many files
        FileTooLargeError: If any file exceeds the size limit
    """
    present = [f for f in files or [] if f is not None and f.filename]
    if len(present) > settings.MAX_FILES_PER_FIELD:
        raise TooManyFilesError(field, len(present), settings.MAX_FILES_PER_FIELD)
    return [await read_upload(f) for f in present]
