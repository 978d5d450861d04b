from fastapi import APIRouter
from pydantic import BaseModel

from docintake.config import settings
from docintake.services.ocr_client import RemoteJobClient

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    remote_api: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check API health and remote API reachability.

    The service itself stays healthy when the remote API is down; the
    remote status is reported separately.
    """
    if not settings.api_key:
        remote_status = "unconfigured"
    elif await RemoteJobClient(api_key=settings.api_key).health():
        remote_status = "healthy"
    else:
        remote_status = "unhealthy"

    return HealthResponse(
        status="healthy",
        remote_api=remote_status,
    )
