# app/services/photo_service.py
"""
Photo storage for vehicle entries.

Upload: POST /entries/{id}/photo (multipart field "photo")
Saves to: {UPLOAD_DIR}/{original filename}
Served at: /uploads/{filename}

Only jpg/jpeg/png/gif up to MAX_UPLOAD_BYTES are accepted. Both checks run
before anything touches the disk.
"""

import os
import re
from typing import BinaryIO, Optional

from app.config import settings
from app.exceptions import UploadRejected
from app.utils.logger import get_logger

logger = get_logger(__name__)

PHOTO_URL_PREFIX = "/uploads/"
ALLOWED_EXTENSIONS = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)


def safe_filename(filename: Optional[str]) -> str:
    """Keep the client's name but strip any directory components."""
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    if not name or name in (".", ".."):
        raise UploadRejected("A file name is required")
    return name


def validate_photo(filename: Optional[str], stream: BinaryIO) -> tuple[str, bytes]:
    name = safe_filename(filename)
    if not ALLOWED_EXTENSIONS.search(name):
        raise UploadRejected("Only image files are allowed (jpg, jpeg, png, gif)")

    limit = settings.MAX_UPLOAD_BYTES
    raw = stream.read(limit + 1)
    if not raw:
        raise UploadRejected("Uploaded file is empty")
    if len(raw) > limit:
        raise UploadRejected(f"File exceeds the {limit // (1024 * 1024)}MB limit", status_code=413)
    return name, raw


def save_photo(filename: Optional[str], stream: BinaryIO) -> str:
    """Validate and store an uploaded photo. Returns its public URL."""
    name, raw = validate_photo(filename, stream)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filepath = os.path.join(settings.UPLOAD_DIR, name)
    with open(filepath, "wb") as f:
        f.write(raw)
    logger.info(f"[PHOTO] Saved {name} ({len(raw)} bytes)")
    return PHOTO_URL_PREFIX + name


def photo_path(photo_url: Optional[str]) -> Optional[str]:
    """Map a stored /uploads/... URL back to a file on disk, or None if it is gone."""
    if not photo_url:
        return None
    name = os.path.basename(photo_url.removeprefix(PHOTO_URL_PREFIX))
    filepath = os.path.join(settings.UPLOAD_DIR, name)
    return filepath if os.path.isfile(filepath) else None
