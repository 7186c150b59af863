"""
File Upload Utility - store student resumes in the local blob directory.

Uploads arrive as JSON {file_name, content} with base64 content. Files are
written to `settings.upload_dir` and served back under
`settings.upload_url_prefix`.

Max file size: settings.max_resume_size_mb (5MB by default)
"""

import base64
import binascii
import logging
import os
import re
import time
from typing import Optional

from sqlalchemy.orm import Session

from jobboard.core.auth import SessionClaims
from jobboard.core.authorization import enforce, require_profile
from jobboard.core.config import get_settings
from jobboard.core.errors import ValidationError
from jobboard.db.postgres import fetch_one, on_commit, on_rollback
from jobboard.schemas.schemas import ResumeUpload, ResumeUploadResponse, UserRole
from jobboard.services.account_service import set_resume_url

logger = logging.getLogger(__name__)

UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.\-_]")


def safe_file_name(file_name: str) -> str:
    """Replace everything outside [A-Za-z0-9._-] with an underscore."""
    return UNSAFE_CHARS.sub("_", os.path.basename(file_name))


def decode_content(content: str, max_bytes: int) -> bytes:
    """
    Decode base64 upload content.

    Raises:
        ValidationError if content is not base64, empty, or too large
    """
    # Browsers send data URLs ("data:application/pdf;base64,....")
    if content.startswith("data:") and "," in content:
        content = content.split(",", 1)[1]
    try:
        data = base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid file", {"content": "Must be base64 encoded"})

    if not data:
        raise ValidationError("Missing file", {"content": "File is empty"})
    if len(data) > max_bytes:
        raise ValidationError(
            "File too large",
            {"content": f"Maximum size: {max_bytes // (1024 * 1024)}MB"}
        )
    return data


def _stored_path(url: Optional[str]) -> Optional[str]:
    """Local path of a resume URL we served, or None for external URLs."""
    settings = get_settings()
    prefix = settings.upload_url_prefix.rstrip("/") + "/"
    if not url or not url.startswith(prefix):
        return None
    return os.path.join(settings.upload_dir, os.path.basename(url[len(prefix):]))


def _remove_file(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)
        logger.info("Removed resume file %s", path)


def store_resume(db: Session, claims: Optional[SessionClaims], upload: ResumeUpload) -> ResumeUploadResponse:
    """
    Save the caller's resume and point their profile at it.

    Process:
    1. Validate and decode the base64 payload
    2. Write <user_id>_<epoch ms>_<safe name> into the upload directory
    3. Update student_profiles.resume_url

    The new file is removed again if the transaction rolls back; the
    replaced file is removed once it commits.
    """
    enforce(claims, UserRole.student.value)
    profile_id = require_profile(claims)
    settings = get_settings()

    data = decode_content(upload.content, settings.max_resume_size_mb * 1024 * 1024)

    previous = fetch_one(db, "SELECT resume_url FROM student_profiles WHERE id = :id", {"id": profile_id})
    previous_path = _stored_path(previous["resume_url"]) if previous else None

    out_name = f"{claims.user_id}_{int(time.time() * 1000)}_{safe_file_name(upload.file_name)}"
    out_path = os.path.join(settings.upload_dir, out_name)
    url = f"{settings.upload_url_prefix.rstrip('/')}/{out_name}"

    set_resume_url(db, profile_id, url)
    on_rollback(db, lambda: _remove_file(out_path))

    os.makedirs(settings.upload_dir, exist_ok=True)
    with open(out_path, "wb") as f:
        f.write(data)

    if previous_path and previous_path != out_path:
        on_commit(db, lambda: _remove_file(previous_path))
    logger.info("Stored resume for student %s at %s", profile_id, url)

    return ResumeUploadResponse(url=url)
