"""
HTTP client for the remote OCR API.

IMPORTANT: job URLs are always built here from the configured base URL and
the job id. URLs found in response bodies may point at internal
infrastructure and are never stored, returned or followed.
"""

import logging
from typing import Any

import httpx

from docintake.config import settings
from docintake.exceptions import InvalidInputError, ProtocolError, RemoteError
from docintake.schemas.job import OCRJob, OCRJobStatus
from docintake.services.response_shapes import (
    ERROR_SHAPES,
    STATUS_SHAPES,
    STATUS_TEXT_SHAPES,
    extract_job_id,
    extract_page_count,
    extract_text,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_URLS = {"undefined", "null", "none"}


class RemoteJobClient:
    """
    Client for submitting documents to the remote OCR service and polling them.

    The only URL this object keeps is its own base URL.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        status_timeout: float | None = None,
        submit_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer token for the remote API.
            base_url: Trusted public API base. Defaults to settings.
            status_timeout: Timeout for status and download requests.
            submit_timeout: Timeout for document uploads.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self.status_timeout = status_timeout or settings.ocr_status_timeout
        self.submit_timeout = submit_timeout or settings.ocr_submit_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    def status_url_for(self, job_id: str) -> str:
        """Status URL for a job, derived from the trusted base."""
        return f"{self._base_url}/ocr/v1/{job_id}"

    def text_url_for(self, job_id: str) -> str:
        """Extracted-text download URL for a job, derived from the trusted base."""
        return f"{self._base_url}/ocr/v1/{job_id}/download/json"

    def _ensure_trusted(self, url: str) -> None:
        """Reject URLs that were not built from our base URL."""
        if not url.startswith(f"{self._base_url}/ocr/v1/"):
            raise InvalidInputError(f"URL is not an OCR job URL for {self._base_url}")

    async def _send(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        action: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, turning transport failures and non-2xx into RemoteError."""
        try:
            async with self._client(timeout) as client:
                response = await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.error(f"OCR {action} request failed: {method} {url}: {e}")
            raise RemoteError(f"OCR {action} failed: {e}", url=url) from e

        if not response.is_success:
            body = response.text
            logger.error(f"OCR {action} failed: {method} {url} -> HTTP {response.status_code}: {body[:500]}")
            raise RemoteError(
                f"OCR {action} failed: {response.status_code} - {body[:500]}",
                status_code=response.status_code,
                body=body,
                url=url,
            )
        return response

    def _decode_json(self, response: httpx.Response, action: str) -> dict:
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"OCR {action} returned non-JSON body from {response.request.url}")
            raise ProtocolError(f"OCR {action} returned a non-JSON response") from e
        if not isinstance(payload, dict):
            raise ProtocolError(f"OCR {action} returned an unexpected payload")
        return payload

    def _job_from_submit(self, payload: dict) -> OCRJob:
        job_id = extract_job_id(payload)
        if not job_id:
            logger.error(f"OCR API did not return a job ID (keys: {sorted(payload)})")
            raise ProtocolError("OCR API did not return a job ID")

        return OCRJob(
            job_id=job_id,
            status=OCRJobStatus.parse(STATUS_SHAPES.extract(payload), default=OCRJobStatus.QUEUED),
            status_url=self.status_url_for(job_id),
            text_url=self.text_url_for(job_id),
        )

    async def submit_ocr(self, content: bytes, file_name: str, content_type: str) -> OCRJob:
        """
        Submit a document for OCR as a multipart upload.

        Args:
            content: Raw document bytes.
            file_name: Original file name.
            content_type: MIME type of the document.

        Returns:
            The queued job with self-constructed status and text URLs.

        Raises:
            RemoteError: If the API does not answer with success.
            ProtocolError: If no job id can be found in the response.
        """
        url = f"{self._base_url}/ocr/v1/process"
        response = await self._send(
            "POST",
            url,
            timeout=self.submit_timeout,
            action="submit",
            data={"file_name": file_name},
            files={"file": (file_name, content, content_type)},
        )
        job = self._job_from_submit(self._decode_json(response, "submit"))
        logger.info(f"OCR job submitted: {job.job_id} ({file_name}, {len(content)} bytes), status: {job.status.value}")
        return job

    async def submit_ocr_url(self, document_url: str, file_name: str) -> OCRJob:
        """
        Submit a document that is already reachable at a URL.

        Raises:
            RemoteError: If the API does not answer with success.
            ProtocolError: If no job id can be found in the response.
        """
        url = f"{self._base_url}/ocr/v1/process"
        response = await self._send(
            "POST",
            url,
            timeout=self.submit_timeout,
            action="submit",
            json={"document_url": document_url, "file_name": file_name},
        )
        job = self._job_from_submit(self._decode_json(response, "submit"))
        logger.info(f"OCR job submitted: {job.job_id} ({file_name} by URL), status: {job.status.value}")
        return job

    async def get_ocr_status(self, status_url: str, text_url: str | None = None) -> OCRJob:
        """
        Fetch the current state of a job.

        When the job has completed and a text URL is given, the extracted
        text is downloaded as well. A failed download is not an error; the
        job is still reported as completed, just without text.

        Args:
            status_url: Status URL returned by a submit call.
            text_url: Optional text URL returned by a submit call.

        Returns:
            The job snapshot.

        Raises:
            InvalidInputError: If the status URL is empty, a placeholder, or
                was not built from this client's base URL.
            RemoteError: If the status request does not succeed.
        """
        if not status_url or status_url.strip().lower() in PLACEHOLDER_URLS:
            raise InvalidInputError("Invalid status URL provided")
        self._ensure_trusted(status_url)
        if text_url:
            self._ensure_trusted(text_url)

        response = await self._send("GET", status_url, timeout=self.status_timeout, action="status check")
        payload = self._decode_json(response, "status check")

        # URLs are rebuilt from the id in the URL we were given, never from the body.
        url_job_id = status_url.rstrip("/").rsplit("/", 1)[-1]
        job_id = extract_job_id(payload) or url_job_id
        status = OCRJobStatus.parse(STATUS_SHAPES.extract(payload), default=OCRJobStatus.PROCESSING)

        text = None
        if status == OCRJobStatus.COMPLETED and text_url:
            text = await self._fetch_extracted_text(text_url, job_id)
        if not text:
            text = extract_text(payload, STATUS_TEXT_SHAPES)

        error = ERROR_SHAPES.extract(payload)
        return OCRJob(
            job_id=job_id,
            status=status,
            status_url=self.status_url_for(url_job_id),
            text_url=self.text_url_for(url_job_id),
            page_count=extract_page_count(payload),
            text=text,
            error=str(error) if error is not None else None,
        )

    async def _fetch_extracted_text(self, text_url: str, job_id: str) -> str | None:
        """Download extracted text, returning None on any failure."""
        try:
            response = await self._send("GET", text_url, timeout=self.status_timeout, action="result fetch")
        except RemoteError as e:
            logger.warning(f"OCR result fetch failed for job {job_id}: {e}")
            return None

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response.text or None

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"OCR result for job {job_id} claimed JSON but could not be decoded")
            return None
        return extract_text(payload)

    async def health(self) -> bool:
        """Check whether the remote API is reachable."""
        try:
            async with self._client(timeout=2.0) as client:
                response = await client.get(f"{self._base_url}/health", headers=self._headers())
            return response.is_success
        except httpx.HTTPError as e:
            logger.debug(f"Remote API health check failed: {e}")
            return False


def create_ocr_client(transport: httpx.AsyncBaseTransport | None = None) -> RemoteJobClient:
    """Create an OCR client from settings."""
    return RemoteJobClient(api_key=settings.require_api_key(), transport=transport)
