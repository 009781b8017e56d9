"""
File Upload Utility - validate and store uploaded blobs on disk.

Categories:
- photo       (.jpg, .jpeg, .png) max 1MB
- certificate (.pdf)              max 2MB

Blobs are written to <upload_dir>/<category>/<uuid><ext>; the metadata
record lives in the store.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import FrozenSet

from fastapi import UploadFile

from app.core.exceptions import ValidationError
from app.models.domain import FileCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadRule:
    max_size_mb: int
    content_types: FrozenSet[str]
    label: str

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * 1024 * 1024


UPLOAD_RULES = {
    FileCategory.photo: UploadRule(
        max_size_mb=1,
        content_types=frozenset({"image/jpeg", "image/jpg", "image/png"}),
        label="JPEG or PNG",
    ),
    FileCategory.certificate: UploadRule(
        max_size_mb=2,
        content_types=frozenset({"application/pdf"}),
        label="PDF",
    ),
}

DEFAULT_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "application/pdf": ".pdf",
}
KNOWN_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.pdf'}


@dataclass(frozen=True)
class ValidatedUpload:
    content: bytes
    original_name: str
    content_type: str
    extension: str


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def read_upload(file: UploadFile, category: FileCategory) -> ValidatedUpload:
    """
    Check type and size of an uploaded file and read its content.

    Args:
        file: FastAPI UploadFile
        category: which rule set applies

    Returns:
        ValidatedUpload with the raw bytes

    Raises:
        ValidationError on a missing name, wrong type, empty or oversized file
    """
    rule = UPLOAD_RULES[category]

    if not file.filename:
        raise ValidationError(["file is required"])

    content_type = (file.content_type or "").lower()
    if content_type not in rule.content_types:
        raise ValidationError(
            [f"Unsupported file type '{content_type or 'unknown'}'. Allowed: {rule.label}"],
            message="Invalid file type",
        )

    # Read one byte past the limit so oversized files are caught without loading them whole
    content = file.file.read(rule.max_size_bytes + 1)
    if not content:
        raise ValidationError(["File is empty"])
    if len(content) > rule.max_size_bytes:
        raise ValidationError(
            [f"File too large. Maximum size: {rule.max_size_mb}MB"],
            message="File too large",
        )

    extension = get_file_extension(file.filename)
    if extension not in KNOWN_EXTENSIONS:
        extension = DEFAULT_EXTENSIONS[content_type]
    return ValidatedUpload(
        content=content,
        original_name=os.path.basename(file.filename),
        content_type=content_type,
        extension=extension,
    )


def save_blob(upload_dir: str, category: FileCategory, upload: ValidatedUpload) -> str:
    """Write the blob under a fresh uuid name and return its path."""
    directory = os.path.join(upload_dir, category.value)
    os.makedirs(directory, exist_ok=True)

    file_name = f"{uuid.uuid4().hex}{upload.extension}"
    path = os.path.join(directory, file_name)
    with open(path, "wb") as fh:
        fh.write(upload.content)
    return path


def remove_blob(path: str) -> bool:
    """Delete a stored blob. Returns False (and logs) when it could not be removed."""
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        logger.warning("Blob already missing: %s", path)
    except OSError as exc:
        logger.warning("Could not remove blob %s: %s", path, exc)
    return False
