"""Upload validation for book files."""
from __future__ import annotations

import mimetypes
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError


ALLOWED_EXT = {".pdf", ".epub", ".mobi", ".txt"}
ALLOWED_MIME = {
    "application/pdf",
    "application/epub+zip",
    "application/x-mobipocket-ebook",
    "text/plain",
}


def max_upload_bytes() -> int:
    return int(getattr(settings, "BOOK_UPLOAD_MAX_BYTES", 25 * 1024 * 1024))


def validate_upload(file) -> None:
    """Validate file size and a conservative type check.

    Uses the uploaded size and extension; the MIME type guessed from the
    file name is an extra hint only, since no content sniffing is done.
    """
    size = getattr(file, "size", None)
    limit = max_upload_bytes()
    if size is not None and size > limit:
        raise ValidationError(f"File too large (max {limit // (1024 * 1024)} MB)")
    if size == 0:
        raise ValidationError("File is empty")
    ext = Path(getattr(file, "name", "") or "").suffix.lower()
    if ext not in ALLOWED_EXT:
        raise ValidationError("Unsupported file type (PDF, EPUB, MOBI or TXT)")
    guessed, _ = mimetypes.guess_type(getattr(file, "name", ""))
    if guessed and guessed not in ALLOWED_MIME:
        raise ValidationError("Unsupported MIME type")
