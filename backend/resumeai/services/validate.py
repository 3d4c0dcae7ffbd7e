from __future__ import annotations

from typing import Optional

from loguru import logger

from resumeai.core import ALLOWED_MIME_TYPES, MAX_FILE_BYTES, MAX_FILE_MB, JobDetails
from resumeai.errors import ValidationError

FILE_TOO_LARGE = f"File size exceeds {MAX_FILE_MB}MB limit."
WRONG_FILE_TYPE = "Please upload a PDF or an image file."
INCOMPLETE_FORM = "Please complete all steps before analyzing."


def validate_file(size_bytes: int, mime_type: Optional[str]) -> None:
    """Gate a file selection. Size is checked before type."""
    if size_bytes > MAX_FILE_BYTES:
        logger.warning(f"Rejected file: {size_bytes} bytes over {MAX_FILE_BYTES}")
        raise ValidationError(FILE_TOO_LARGE)

    if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
        logger.warning(f"Rejected file: unsupported type {mime_type!r}")
        raise ValidationError(WRONG_FILE_TYPE)


def validate_submission(job_details: JobDetails, preview: Optional[str]) -> None:
    if not preview or not job_details.title.strip() or not job_details.description.strip():
        raise ValidationError(INCOMPLETE_FORM)
