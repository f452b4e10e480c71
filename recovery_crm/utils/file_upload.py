"""Local-disk storage for multipart uploads served from /uploads."""

from __future__ import annotations

import logging
import os
import secrets
import time
from os import SEEK_END

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from recovery_crm.core.config import settings


logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"pdf", "jpg", "jpeg", "png", "doc", "docx"}


class UploadRejectedError(Exception):
    """File failed extension or size validation."""
    pass


def _get_upload_dir() -> str:
    path = settings.UPLOAD_DIR
    os.makedirs(path, exist_ok=True)
    return path


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def build_stored_name(fieldname: str, original_filename: str | None) -> str:
    """{fieldname}-{timestamp_ms}-{random}.{ext}"""
    timestamp_ms = int(time.time() * 1000)
    suffix = secrets.randbelow(10**9)
    ext = file_extension(original_filename)
    return f"{fieldname}-{timestamp_ms}-{suffix}.{ext}"


async def get_upload_file_size(file: UploadFile) -> int:
    """Read size from the underlying file object without loading into memory."""

    def _get_size() -> int:
        stream = file.file
        original_pos = stream.tell()
        try:
            stream.seek(0, SEEK_END)
            return stream.tell()
        finally:
            stream.seek(original_pos)

    return await run_in_threadpool(_get_size)


def validate_upload(filename: str | None, file_size: int) -> None:
    """
    Raises:
        UploadRejectedError: Disallowed extension or file over MAX_UPLOAD_BYTES
    """
    ext = file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise UploadRejectedError(
            "Only PDF, JPG, JPEG, PNG, DOC and DOCX files are allowed"
        )
    if file_size > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise UploadRejectedError(f"File exceeds {limit_mb} MB limit")


async def save_upload(fieldname: str, file: UploadFile) -> str:
    """
    Validate and write an upload to UPLOAD_DIR.

    Returns:
        The stored filename (relative to UPLOAD_DIR)
    """
    size = await get_upload_file_size(file)
    validate_upload(file.filename, size)

    stored_name = build_stored_name(fieldname, file.filename)
    path = os.path.join(_get_upload_dir(), stored_name)

    def _write() -> None:
        file.file.seek(0)
        with open(path, "wb") as out:
            while chunk := file.file.read(1024 * 1024):
                out.write(chunk)

    await run_in_threadpool(_write)
    return stored_name


async def save_optional_uploads(files: dict[str, UploadFile | None]) -> dict[str, str]:
    """
    Store every provided upload, keyed by field name.

    If any file is rejected, files already written for this call are removed.
    """
    stored: dict[str, str] = {}
    try:
        for fieldname, upload in files.items():
            if upload is None or not upload.filename:
                continue
            stored[fieldname] = await save_upload(fieldname, upload)
    except Exception:
        remove_uploads(stored.values())
        raise
    return stored


def remove_uploads(filenames) -> None:
    """Delete stored uploads, ignoring files that are already gone."""
    for name in filenames:
        if not name:
            continue
        path = os.path.join(settings.UPLOAD_DIR, name)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Failed to remove orphaned upload %s", name)
