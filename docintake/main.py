import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docintake.api.routes import health, ocr, translate
from docintake.config import settings
from docintake.exceptions import InvalidInputError, ProtocolError, RemoteError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting document ingestion API")
    logger.info(f"Remote API: {settings.normalized_base_url}")
    logger.info(
        f"Rates: OCR ${settings.rates.ocr_cost_per_page}/page, "
        f"translation ${settings.rates.translation_cost_per_1000_chars}/1000 chars"
    )
    if not settings.api_key:
        logger.warning("API_KEY is not set; OCR and translation requests will fail")
    if not settings.blob_token:
        logger.info(f"Using local blob storage: {settings.uploads_dir}")

    yield

    # Shutdown
    logger.info("Shutting down document ingestion API")


app = FastAPI(
    title="Document Ingestion API",
    description="Remote OCR job tracking and chunked document translation",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    logger.error(f"Remote API error on {request.url.path}: {exc} (upstream status {exc.status_code})")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


@app.exception_handler(ProtocolError)
async def protocol_error_handler(request: Request, exc: ProtocolError):
    logger.error(f"Remote API contract mismatch on {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


# Include routers
app.include_router(health.router)
app.include_router(ocr.router)
app.include_router(translate.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Document Ingestion API",
        "version": "1.0.0",
        "docs": "/docs",
    }


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level="debug" if settings.debug else "info")


if __name__ == "__main__":
    run()
