# 🔹 FILE: hiring_api/uploads.py
# --------------------------------------------------------------
# Upload intake: buffer the multipart file in memory, enforce the
# size limit and the MIME allow-list before anything leaves the box.
# PDFs are accepted by extension too since browsers often send them
# as application/octet-stream.
# --------------------------------------------------------------
from dataclasses import dataclass
from typing import List, Optional, Sequence

from fastapi import UploadFile

from .config import settings
from .errors import PayloadTooLarge, UploadRejected


IMAGE_TYPES = (
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
    "image/svg+xml",
)

DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    content: bytes


def _too_large_message(limit: int) -> str:
    return f"File is too large. Maximum size is {limit // (1024 * 1024)}MB."


def read_upload(
    upload: Optional[UploadFile],
    allowed: Sequence[str],
    max_bytes: Optional[int] = None,
) -> Optional[IncomingFile]:
    """Return the buffered file, or None when the field was not sent."""
    if upload is None or not upload.filename:
        return None

    limit = max_bytes or settings.MAX_UPLOAD_BYTES
    content_type = (upload.content_type or "").lower()
    is_pdf_by_name = upload.filename.lower().endswith(".pdf")
    if content_type not in allowed and not is_pdf_by_name:
        raise UploadRejected("invalid extension")

    content = upload.file.read(limit + 1)
    if len(content) > limit:
        raise PayloadTooLarge(_too_large_message(limit))

    return IncomingFile(filename=upload.filename, content_type=content_type, content=content)


def read_uploads(uploads: Optional[List[UploadFile]], allowed: Sequence[str]) -> List[IncomingFile]:
    files = [read_upload(u, allowed) for u in uploads or []]
    return [f for f in files if f is not None]
