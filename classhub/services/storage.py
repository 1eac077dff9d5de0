"""Local filesystem attachment store.

Uploaded files are written under ``UPLOAD_DIR`` with a uuid-based name and
served back from ``UPLOAD_URL_PREFIX``. Callers get an ``AttachmentData``
value they embed into an assignment or submission.
"""

import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from classhub.core import config
from classhub.core.errors import ValidationFailed

logger = logging.getLogger(__name__)


@dataclass
class AttachmentData:
    filename: str
    url: str
    content_type: Optional[str]
    size: int
    storage_key: str


def _upload_dir() -> Path:
    path = Path(config.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    stream = upload.file
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _human_size(num_bytes: int) -> str:
    return f"{num_bytes // (1024 * 1024)}MB"


def validate_uploads(
    files: Optional[list[UploadFile]],
    max_files: int = config.MAX_UPLOAD_FILES,
    max_bytes: int = config.MAX_ASSIGNMENT_FILE_BYTES,
) -> list[UploadFile]:
    """Check count, size and type of incoming files.

    Returns the non-empty uploads. Raises ValidationFailed on the first
    offending file.
    """
    uploads = [f for f in (files or []) if f is not None and f.filename]

    if len(uploads) > max_files:
        raise ValidationFailed(f"Too many files. Maximum {max_files} files allowed.")

    for upload in uploads:
        _, ext = os.path.splitext(upload.filename)
        if (
            ext.lower() not in config.ALLOWED_UPLOAD_EXTENSIONS
            or upload.content_type not in config.ALLOWED_UPLOAD_CONTENT_TYPES
        ):
            raise ValidationFailed("Invalid file type. Allowed: pdf, zip, doc, docx, png, jpg")
        if _upload_size(upload) > max_bytes:
            raise ValidationFailed(f"File too large. Maximum size is {_human_size(max_bytes)}.")

    return uploads


def save(upload: UploadFile) -> AttachmentData:
    original_filename = upload.filename or "unknown_file"
    _, ext = os.path.splitext(original_filename)
    storage_key = f"{uuid.uuid4().hex}{ext.lower()}"
    dest = _upload_dir() / storage_key

    upload.file.seek(0)
    with open(dest, "wb") as out:
        shutil.copyfileobj(upload.file, out)

    size = dest.stat().st_size
    logger.info("stored '%s' as %s (%d bytes)", original_filename, storage_key, size)
    return AttachmentData(
        filename=original_filename,
        url=f"{config.UPLOAD_URL_PREFIX}/{storage_key}",
        content_type=upload.content_type,
        size=size,
        storage_key=storage_key,
    )


def save_all(uploads: list[UploadFile]) -> list[AttachmentData]:
    """Store every upload, skipping the ones that fail.

    A partial result is acceptable: failures are logged and the caller
    decides whether an empty result blocks the operation.
    """
    stored: list[AttachmentData] = []
    for upload in uploads:
        try:
            stored.append(save(upload))
        except OSError:
            logger.exception("failed to store upload '%s'", upload.filename)
    return stored


def delete(storage_key: Optional[str]) -> bool:
    """Best-effort removal of a stored file. Never raises."""
    if not storage_key:
        return False
    path = _upload_dir() / os.path.basename(storage_key)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("stored file %s already gone", storage_key)
        return False
    except OSError:
        logger.exception("failed to delete stored file %s", storage_key)
        return False
    return True
