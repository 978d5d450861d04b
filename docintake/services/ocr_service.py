import logging
import time

from fastapi import BackgroundTasks

from docintake.config import RatesConfig, settings
from docintake.exceptions import DocIntakeError, RemoteError
from docintake.schemas.job import OCRJobHandle, OCRJobStatus, OCRStatusResult
from docintake.services.blob_service import BlobStore, get_blob_store
from docintake.services.ocr_client import RemoteJobClient, create_ocr_client
from docintake.services.usage import format_cost, ocr_cost

logger = logging.getLogger(__name__)


class OCRService:
    """
    Orchestrates remote OCR jobs.

    Turns uploads into job handles, and status polls into normalized
    results with cost. Holds no per-job state: every status check is a
    fresh read from the remote service.
    """

    def __init__(
        self,
        client: RemoteJobClient,
        blob_store: BlobStore | None = None,
        rates: RatesConfig | None = None,
    ):
        """
        Initialize the OCR service.

        Args:
            client: Remote OCR API client.
            blob_store: Transient storage for staged uploads and cleanup.
            rates: Pricing. Defaults to settings.
        """
        self.client = client
        self.blob_store = blob_store or get_blob_store()
        self.rates = rates or settings.rates

    async def submit(self, content: bytes, file_name: str, content_type: str) -> OCRJobHandle:
        """Submit a document directly to the OCR API."""
        job = await self.client.submit_ocr(content, file_name, content_type)
        return OCRJobHandle(
            job_id=job.job_id,
            status=job.status,
            status_url=job.status_url,
            text_url=job.text_url,
        )

    async def submit_staged(self, content: bytes, file_name: str, content_type: str) -> OCRJobHandle:
        """
        Stage a document in transient storage, then submit it.

        If the blob store exposes a public URL the OCR API fetches the
        document from there, otherwise the bytes are uploaded directly.
        The returned handle carries the blob reference so the caller can
        pass it back to check_status for cleanup.
        """
        pathname = f"ocr/{int(time.time() * 1000)}-{file_name}"
        blob = await self.blob_store.put(pathname, content, content_type)
        logger.info(f"[OCR Submit] Staged {file_name} in {self.blob_store.name} blob store: {blob.ref}")

        try:
            if blob.public_url:
                job = await self.client.submit_ocr_url(blob.public_url, file_name)
            else:
                job = await self.client.submit_ocr(content, file_name, content_type)
        except DocIntakeError:
            await self.cleanup_blob(blob.ref)
            raise

        return OCRJobHandle(
            job_id=job.job_id,
            status=job.status,
            status_url=job.status_url,
            text_url=job.text_url,
            blob_ref=blob.ref,
        )

    async def cleanup_blob(self, blob_ref: str) -> bool:
        """
        Best-effort delete of a transient blob.

        Returns:
            True if the delete went through, False if it failed. Failures
            are logged, never raised.
        """
        try:
            await self.blob_store.delete(blob_ref)
        except Exception as e:
            logger.warning(f"[OCR Status] Failed to delete blob {blob_ref}: {e}")
            return False
        logger.info(f"[OCR Status] Blob deleted: {blob_ref}")
        return True

    async def check_status(
        self,
        status_url: str,
        text_url: str | None = None,
        blob_ref: str | None = None,
        background_tasks: BackgroundTasks | None = None,
    ) -> OCRStatusResult:
        """
        Check an OCR job and normalize the result.

        Args:
            status_url: Status URL from the job handle.
            text_url: Optional text URL from the job handle.
            blob_ref: Transient blob to clean up once the job has completed.
            background_tasks: If given, cleanup runs after the response is
                sent instead of inline.

        Returns:
            Normalized result with cost.

        Raises:
            InvalidInputError: If the status URL is unusable.
            RemoteError: If the remote status request fails.
        """
        logger.info(f"[OCR Status] Checking: {status_url}")
        try:
            job = await self.client.get_ocr_status(status_url, text_url)
        except RemoteError as e:
            logger.error(f"[OCR Status] Status check failed for {status_url} (HTTP {e.status_code}): {e}")
            raise

        logger.info(f"[OCR Status] Job {job.job_id}: {job.status.value}")

        if job.status == OCRJobStatus.COMPLETED and blob_ref:
            logger.info(f"[OCR Status] Cleaning up blob: {blob_ref}")
            if background_tasks is not None:
                background_tasks.add_task(self.cleanup_blob, blob_ref)
            else:
                await self.cleanup_blob(blob_ref)

        cost = ocr_cost(job.status, job.page_count, self.rates)
        if job.status == OCRJobStatus.COMPLETED:
            logger.info(
                f"[OCR Status] Job {job.job_id} completed: {job.page_count or 1} page(s), "
                f"{len(job.text or '')} chars, cost {format_cost(cost)}"
            )
        elif job.status == OCRJobStatus.FAILED:
            logger.warning(f"[OCR Status] Job {job.job_id} failed: {job.error}")

        return OCRStatusResult(
            job_id=job.job_id,
            status=job.status,
            text=job.text,
            page_count=max(job.page_count or 1, 1),
            cost=cost,
            error=job.error,
        )


def get_ocr_service() -> OCRService:
    """Create an OCR service from settings."""
    return OCRService(client=create_ocr_client())
