from __future__ import annotations

import pytest

from docintake.exceptions import InvalidInputError
from docintake.utils import FileType, ValidationError, detect_file_type, validate_filename, validate_upload


def test_png_is_accepted(png_bytes: bytes) -> None:
    assert validate_upload(png_bytes) == (FileType.IMAGE, "image/png")


def test_pdf_is_accepted(pdf_bytes: bytes) -> None:
    assert validate_upload(pdf_bytes) == (FileType.PDF, "application/pdf")


def test_detect_file_type() -> None:
    assert detect_file_type(b"\xff\xd8\xff\xe0rest") == (FileType.IMAGE, "image/jpeg")
    assert detect_file_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == (FileType.IMAGE, "image/webp")
    assert detect_file_type(b"RIFF\x00\x00\x00\x00WAVEfmt ") == (FileType.UNKNOWN, None)
    assert detect_file_type(b"hello world") == (FileType.UNKNOWN, None)


@pytest.mark.parametrize(
    "content, message",
    [
        (b"", "empty"),
        (b"plain text, not a scan", "Unrecognized"),
        (b"\x89PNG\r\n\x1a\n" + b"\x00" * 10, "corrupt or truncated"),
        (b"%PDF-1.7\ngarbage", "PDF is corrupt"),
    ],
)
def test_invalid_uploads(content: bytes, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_upload(content)


def test_too_large(png_bytes: bytes) -> None:
    with pytest.raises(ValidationError, match="too large"):
        validate_upload(png_bytes + b"\x00" * (1024 * 1024), max_size_mb=1)


def test_disallowed_type(pdf_bytes: bytes) -> None:
    with pytest.raises(ValidationError, match="not accepted"):
        validate_upload(pdf_bytes, allowed_types=(FileType.IMAGE,))


def test_validation_error_is_invalid_input() -> None:
    assert issubclass(ValidationError, InvalidInputError)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("scan.png", "scan.png"),
        ("/etc/passwd", "passwd"),
        ("C:\\Users\\me\\scan.pdf", "scan.pdf"),
        ("../../scan.png", "scan.png"),
        ("my scan (1).png", "my_scan__1_.png"),
    ],
)
def test_validate_filename(filename: str, expected: str) -> None:
    assert validate_filename(filename) == expected


@pytest.mark.parametrize("filename", ["", ".env", "scan..png", "a" * 256])
def test_validate_filename_rejects(filename: str) -> None:
    with pytest.raises(ValidationError):
        validate_filename(filename)
