"""
Upload validation for documents sent to OCR.

Uploads are checked before anything leaves the service:
1. Size limits
2. Magic byte detection (file signature)
3. Library-specific validation (Pillow for images, PyMuPDF for PDFs)

The declared content type of an upload is never trusted; the MIME type sent
to the OCR API is derived from the detected signature.
"""

import io
import logging
import re
from enum import Enum
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from docintake.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class FileType(str, Enum):
    """Document types accepted for OCR."""

    IMAGE = "image"
    PDF = "pdf"
    UNKNOWN = "unknown"


# Magic byte signatures mapped to (file type, MIME type)
MAGIC_BYTES = {
    b"\xff\xd8\xff": (FileType.IMAGE, "image/jpeg"),
    b"\x89PNG\r\n\x1a\n": (FileType.IMAGE, "image/png"),
    b"GIF87a": (FileType.IMAGE, "image/gif"),
    b"GIF89a": (FileType.IMAGE, "image/gif"),
    b"II*\x00": (FileType.IMAGE, "image/tiff"),
    b"MM\x00*": (FileType.IMAGE, "image/tiff"),
    b"RIFF": (FileType.IMAGE, "image/webp"),  # needs further validation
    b"%PDF-": (FileType.PDF, "application/pdf"),
}

MAX_FILENAME_CHARS = 255
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class ValidationError(InvalidInputError):
    """Raised when an upload fails validation."""

    pass


def detect_file_type(content: bytes) -> tuple[FileType, str | None]:
    """
    Detect file type and MIME type from magic bytes.

    Args:
        content: File content (at least the first 12 bytes).

    Returns:
        Tuple of (file type, MIME type). MIME type is None when unknown.
    """
    for signature, (file_type, mime_type) in MAGIC_BYTES.items():
        if content.startswith(signature):
            # RIFF is only accepted as WebP
            if signature == b"RIFF" and content[8:12] != b"WEBP":
                continue
            return file_type, mime_type

    return FileType.UNKNOWN, None


def _is_valid_image(content: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        return True
    except Exception as e:
        logger.debug(f"Pillow validation failed: {e}")
        return False


def _is_valid_pdf(content: bytes) -> bool:
    try:
        with fitz.open(stream=content, filetype="pdf") as doc:
            if doc.page_count < 1:
                logger.warning("Uploaded PDF has zero pages")
                return False
            _ = doc[0]
        return True
    except Exception as e:
        logger.debug(f"PyMuPDF validation failed: {e}")
        return False


def validate_upload(
    content: bytes,
    allowed_types: tuple[FileType, ...] = (FileType.IMAGE, FileType.PDF),
    max_size_mb: int = 10,
) -> tuple[FileType, str]:
    """
    Validate an uploaded document.

    Args:
        content: Full file content.
        allowed_types: File types accepted by the caller.
        max_size_mb: Maximum file size in MB.

    Returns:
        Tuple of (detected file type, MIME type to send upstream).

    Raises:
        ValidationError: If the upload fails any check.
    """
    size = len(content)
    if size == 0:
        raise ValidationError("Uploaded file is empty")

    max_size_bytes = max_size_mb * 1024 * 1024
    if size > max_size_bytes:
        raise ValidationError(f"File too large: {size / 1024 / 1024:.1f}MB (max {max_size_mb}MB)")

    file_type, mime_type = detect_file_type(content[:32])
    if file_type == FileType.UNKNOWN or mime_type is None:
        raise ValidationError("Unrecognized document format (expected an image or PDF)")

    if file_type not in allowed_types:
        allowed = ", ".join(t.value for t in allowed_types)
        raise ValidationError(f"File type {file_type.value} not accepted (allowed: {allowed})")

    if file_type == FileType.IMAGE and not _is_valid_image(content):
        raise ValidationError("Image data is corrupt or truncated")
    if file_type == FileType.PDF and not _is_valid_pdf(content):
        raise ValidationError("PDF is corrupt or has no pages")

    logger.info(f"Upload validated: {mime_type}, {size / 1024:.1f}KB")
    return file_type, mime_type


def validate_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to something usable in a blob pathname.

    Directory components (either separator style) are dropped and any
    character outside letters, digits, '.', '-' and '_' becomes '_'.

    Args:
        filename: Filename as sent by the client.

    Returns:
        The bare, URL-safe file name.

    Raises:
        ValidationError: If nothing usable is left, the name is hidden or
            contains '..', or it is longer than 255 characters.
    """
    base_name = Path(filename.replace("\\", "/")).name if filename else ""
    if not base_name:
        raise ValidationError("Upload has no usable filename")

    if base_name.startswith(".") or ".." in base_name:
        raise ValidationError(f"Refusing suspicious filename: {base_name}")

    if len(base_name) > MAX_FILENAME_CHARS:
        raise ValidationError(f"Filename longer than {MAX_FILENAME_CHARS} characters")

    return UNSAFE_FILENAME_CHARS.sub("_", base_name)
