from __future__ import annotations

import io

import fitz
import pytest
from PIL import Image

from docintake.exceptions import RemoteError
from docintake.services.blob_service import BlobStore, StoredBlob


class RecordingBlobStore(BlobStore):
    """In-memory blob store that records deletes."""

    def __init__(self, fail_on_missing: bool = False):
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_on_missing = fail_on_missing

    @property
    def name(self) -> str:
        return "memory"

    async def put(self, pathname: str, content: bytes, content_type: str) -> StoredBlob:
        ref = f"memory://{pathname}"
        self.blobs[ref] = content
        return StoredBlob(ref=ref)

    async def delete(self, ref: str) -> None:
        self.deleted.append(ref)
        if ref not in self.blobs:
            if self.fail_on_missing:
                raise RemoteError("blob not found", status_code=404)
            return
        del self.blobs[ref]


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Declaration of income")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def strict_blob_store() -> RecordingBlobStore:
    """Blob store that fails when asked to delete a blob it no longer has."""
    return RecordingBlobStore(fail_on_missing=True)
