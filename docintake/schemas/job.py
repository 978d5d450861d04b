from enum import Enum

from pydantic import BaseModel, Field


class OCRJobStatus(str, Enum):
    """Status of a remote OCR job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether the job has finished (successfully or not)."""
        return self in (OCRJobStatus.COMPLETED, OCRJobStatus.FAILED)

    @classmethod
    def parse(cls, value: object, default: "OCRJobStatus") -> "OCRJobStatus":
        """
        Map a raw remote status onto the enum.

        Args:
            value: Status value from the remote response (may be missing).
            default: Status to use when the value is empty.

        Returns:
            The matching status. Unknown non-empty values are treated as
            still processing since the job has not reported a terminal state.
        """
        if not value:
            return default
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.PROCESSING


class OCRJob(BaseModel):
    """Snapshot of a remote OCR job as seen by the client."""

    job_id: str
    status: OCRJobStatus
    status_url: str
    text_url: str
    page_count: int | None = None
    text: str | None = None
    error: str | None = None


class OCRJobHandle(BaseModel):
    """Everything a caller needs to poll a submitted job."""

    job_id: str
    status: OCRJobStatus
    status_url: str
    text_url: str
    blob_ref: str | None = Field(
        default=None,
        description="Transient blob holding the uploaded document, if staged",
    )


class OCRStatusResult(BaseModel):
    """Normalized result of a status check."""

    job_id: str
    status: OCRJobStatus
    text: str | None = None
    page_count: int = 1
    cost: float = 0.0
    error: str | None = None
