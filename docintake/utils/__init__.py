"""Utility modules for the ingestion service."""

from docintake.utils.file_validation import (
    FileType,
    ValidationError,
    detect_file_type,
    validate_filename,
    validate_upload,
)

__all__ = [
    "FileType",
    "ValidationError",
    "detect_file_type",
    "validate_filename",
    "validate_upload",
]
