"""
File Upload Utility - Store resume files attached to applications.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)

Max file size: settings.max_upload_mb (5MB by default)
"""

import logging
import os
import random
import time
from typing import Optional

from fastapi import UploadFile

from placenet.core.config import get_settings
from placenet.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def unique_filename(field_name: str, original: str) -> str:
    """<field>-<epoch ms>-<random>.<ext>, same shape as the stored paths clients already see."""
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{field_name}-{suffix}{get_file_extension(original)}"


async def save_resume(file: Optional[UploadFile], upload_dir: Optional[str] = None) -> Optional[str]:
    """
    Validate and store an uploaded resume.

    Args:
        file: FastAPI UploadFile, or None when the form had no file
        upload_dir: target directory (defaults to settings.upload_dir)

    Returns:
        Stored path relative to the working directory, or None without a file

    Raises:
        ValidationError on a bad extension or an oversized file
    """
    if file is None or not file.filename:
        return None

    settings = get_settings()
    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only .pdf, .doc, and .docx files are allowed!")

    content = await file.read()
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise ValidationError(f"File too large. Maximum size: {settings.max_upload_mb}MB")

    target_dir = upload_dir or settings.upload_dir
    os.makedirs(target_dir, exist_ok=True)
    path = os.path.join(target_dir, unique_filename("resume", file.filename))
    with open(path, "wb") as fh:
        fh.write(content)

    logger.info("Stored resume upload %s (%d bytes)", path, len(content))
    return path
