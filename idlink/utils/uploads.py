"""
Disk storage for uploaded application artifacts.
"""
import logging
import os
import shutil
import time
from typing import Optional

from fastapi import UploadFile

from idlink import settings

logger = logging.getLogger(__name__)

# Multipart field names accepted on application submission
ARTIFACT_FIELDS = ("photo", "signature", "cor")


def build_upload_filename(field_name: str, original_name: str, now: Optional[float] = None) -> str:
    """Return ``{field}-{epoch ms}{ext}``, keeping the client's extension."""
    if now is None:
        now = time.time()
    ext = os.path.splitext(original_name or "")[1]
    return f"{field_name}-{int(now * 1000)}{ext}"


def save_upload(
    upload: Optional[UploadFile],
    field_name: str,
    upload_dir: Optional[str] = None,
) -> Optional[str]:
    """
    Persist an uploaded file and return its generated filename.

    Returns None when no file was sent for the field. The file is written
    before any database row references it; it is not removed if the later
    insert fails.
    """
    if upload is None or not upload.filename:
        return None

    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)

    filename = build_upload_filename(field_name, upload.filename)
    destination = os.path.join(upload_dir, filename)
    with open(destination, "wb") as out:
        shutil.copyfileobj(upload.file, out)

    logger.info("Stored %s upload as %s", field_name, filename)
    return filename
