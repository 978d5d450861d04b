from pydantic import BaseModel, Field

from docintake.schemas.job import OCRJobStatus


class OCRSubmitResponse(BaseModel):
    """Response after submitting a document for OCR."""

    success: bool = True
    document_id: str = Field(description="Caller-supplied document id, or the job id")
    job_id: str = Field(description="Remote job identifier")
    status: OCRJobStatus
    status_url: str
    text_url: str
    blob_ref: str | None = Field(
        default=None,
        description="Pass back to the status endpoint so the upload can be cleaned up",
    )


class OCRStatusResponse(BaseModel):
    """Response for the OCR status endpoint."""

    success: bool = True
    job_id: str
    status: OCRJobStatus
    text: str | None = None
    page_count: int
    ocr_cost: float
    error: str | None = None
