import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile, status

from docintake.config import settings
from docintake.schemas.ocr import OCRStatusResponse, OCRSubmitResponse
from docintake.services.ocr_service import OCRService, get_ocr_service
from docintake.utils.file_validation import validate_filename, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ocr", tags=["OCR"])


def ocr_service_dependency() -> OCRService:
    """Get the OCR service, failing the request if the API key is missing."""
    try:
        return get_ocr_service()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post(
    "/submit",
    response_model=OCRSubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_ocr(
    file: UploadFile = File(..., description="Image or PDF to process"),
    document_id: str | None = Form(default=None, alias="documentId", description="Caller's document id"),
    staged: bool = Form(default=False, description="Stage the upload in transient blob storage first"),
    service: OCRService = Depends(ocr_service_dependency),
):
    """
    Submit a scanned document for OCR.

    Returns a job handle. Poll /ocr/status with the returned URLs (and
    blob_ref, when staged) until the job completes or fails.
    """
    safe_filename = validate_filename(file.filename or "document")
    content = await file.read()
    _, content_type = validate_upload(content, max_size_mb=settings.max_upload_mb)

    logger.info(f"[OCR Submit] Processing {safe_filename} ({content_type}, {len(content)} bytes)")

    if staged:
        handle = await service.submit_staged(content, safe_filename, content_type)
    else:
        handle = await service.submit(content, safe_filename, content_type)

    logger.info(f"[OCR Submit] Job submitted: {handle.job_id}, status: {handle.status.value}")

    return OCRSubmitResponse(
        document_id=document_id or handle.job_id,
        job_id=handle.job_id,
        status=handle.status,
        status_url=handle.status_url,
        text_url=handle.text_url,
        blob_ref=handle.blob_ref,
    )


@router.get("/status", response_model=OCRStatusResponse)
async def get_ocr_status(
    background_tasks: BackgroundTasks,
    status_url: str | None = Query(default=None, alias="statusUrl"),
    text_url: str | None = Query(default=None, alias="textUrl"),
    blob_url: str | None = Query(default=None, alias="blobUrl"),
    service: OCRService = Depends(ocr_service_dependency),
):
    """
    Check an OCR job and fetch its text once complete.

    When the job has completed and blobUrl is given, the staged upload is
    deleted after the response is sent.
    """
    if not status_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing statusUrl parameter",
        )

    result = await service.check_status(
        status_url,
        text_url=text_url or None,
        blob_ref=blob_url or None,
        background_tasks=background_tasks,
    )

    return OCRStatusResponse(
        job_id=result.job_id,
        status=result.status,
        text=result.text,
        page_count=result.page_count,
        ocr_cost=result.cost,
        error=result.error,
    )
