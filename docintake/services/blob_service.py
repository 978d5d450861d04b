"""
Transient blob storage for uploaded documents.

Uploads only need to live until the remote OCR job has read them. Two
backends are provided:
- LocalBlobStore keeps files under the uploads directory.
- HttpBlobStore talks to a hosted blob API (Vercel Blob compatible).

Deleting a blob that no longer exists is not an error for either backend,
so cleanup can be attempted on every completed status check.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote, urlparse

import httpx
from fastapi.concurrency import run_in_threadpool

from docintake.config import settings
from docintake.exceptions import InvalidInputError, ProtocolError, RemoteError

logger = logging.getLogger(__name__)


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


@dataclass
class StoredBlob:
    """A document placed in transient storage."""

    ref: str
    """Reference used to delete the blob later."""

    public_url: str | None = None
    """URL the remote OCR service can download from, if any."""


class BlobStore(ABC):
    """Abstract base class for transient blob stores."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""
        pass

    @abstractmethod
    async def put(self, pathname: str, content: bytes, content_type: str) -> StoredBlob:
        """
        Store a document.

        Args:
            pathname: Relative name for the blob (e.g. 'ocr/123-scan.png').
            content: Document bytes.
            content_type: MIME type of the document.

        Returns:
            The stored blob reference.
        """
        pass

    @abstractmethod
    async def delete(self, ref: str) -> None:
        """
        Delete a blob by reference.

        Missing blobs are ignored.

        Raises:
            InvalidInputError: If the reference does not belong to this store.
            RemoteError: If the backend refuses the deletion.
        """
        pass


class LocalBlobStore(BlobStore):
    """Blob store backed by the local uploads directory."""

    def __init__(self, root: Path | None = None):
        self.root = (root or settings.uploads_dir).resolve()

    @property
    def name(self) -> str:
        return "local"

    def _path_for_ref(self, ref: str) -> Path:
        parsed = urlparse(ref)
        if parsed.scheme != "file":
            raise InvalidInputError(f"Not a local blob reference: {ref}")
        path = Path(unquote(parsed.path)).resolve()
        # Only files we put under our own root may be deleted
        if not path.is_relative_to(self.root):
            raise InvalidInputError(f"Blob reference outside uploads directory: {ref}")
        return path

    async def put(self, pathname: str, content: bytes, content_type: str) -> StoredBlob:
        path = (self.root / pathname).resolve()
        if not path.is_relative_to(self.root):
            raise InvalidInputError(f"Invalid blob pathname: {pathname}")
        await run_in_threadpool(_write_file, path, content)
        logger.debug(f"[Blob] Stored {len(content)} bytes at {path}")
        return StoredBlob(ref=path.as_uri())

    async def delete(self, ref: str) -> None:
        path = self._path_for_ref(ref)
        await run_in_threadpool(path.unlink, missing_ok=True)
        logger.debug(f"[Blob] Deleted {path}")


class HttpBlobStore(BlobStore):
    """Blob store backed by a hosted blob HTTP API."""

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token = token
        self.api_url = (api_url or settings.blob_api_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "http"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def put(self, pathname: str, content: bytes, content_type: str) -> StoredBlob:
        url = f"{self.api_url}/{quote(pathname)}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.put(
                    url,
                    content=content,
                    headers={
                        **self._headers(),
                        "x-content-type": content_type,
                        "x-add-random-suffix": "0",
                    },
                )
        except httpx.RequestError as e:
            raise RemoteError(f"Blob upload failed: {e}", url=url) from e

        if not response.is_success:
            raise RemoteError(
                f"Blob upload failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
                url=url,
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"[Blob] Upload to {url} returned a non-JSON body")
            raise ProtocolError("Blob upload returned a non-JSON response") from e
        blob_url = payload.get("url") if isinstance(payload, dict) else None
        if not blob_url or not isinstance(blob_url, str):
            logger.error(f"[Blob] Upload to {url} returned no blob URL")
            raise ProtocolError("Blob upload response did not include a URL")
        logger.debug(f"[Blob] Uploaded {pathname} to {blob_url}")
        return StoredBlob(ref=blob_url, public_url=blob_url)

    async def delete(self, ref: str) -> None:
        url = f"{self.api_url}/delete"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json={"urls": [ref]}, headers=self._headers())
        except httpx.RequestError as e:
            raise RemoteError(f"Blob delete failed: {e}", url=url) from e

        if response.status_code == 404:
            logger.debug(f"[Blob] Already deleted: {ref}")
            return
        if not response.is_success:
            raise RemoteError(
                f"Blob delete failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
                url=url,
            )
        logger.debug(f"[Blob] Deleted {ref}")


def get_blob_store() -> BlobStore:
    """Pick the blob backend from settings."""
    if settings.blob_token:
        return HttpBlobStore(token=settings.blob_token)
    return LocalBlobStore()
