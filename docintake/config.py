import logging
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class RatesConfig(BaseModel):
    """Usage pricing for the remote services."""

    ocr_cost_per_page: float = Field(default=0.01, ge=0, description="USD charged per OCR page")
    translation_cost_per_1000_chars: float = Field(
        default=0.30, ge=0, description="USD charged per 1000 source characters translated"
    )


class TranslationConfig(BaseModel):
    """Configuration for the translation pipeline."""

    chunk_size: int = Field(default=4000, ge=1, description="Maximum characters sent per translation request")
    target_language: str = Field(default="en", description="Language every document is translated into")
    detect_sample_chars: int = Field(default=5000, ge=1, description="Characters sent for language detection")
    timeout: float = Field(default=120.0, gt=0, description="Request timeout for translation calls")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Remote API (OCR + translation share one base URL and key)
    api_base_url: str = "https://api.case.dev"
    api_key: str | None = None

    # OCR Settings
    ocr_status_timeout: float = 30.0
    ocr_submit_timeout: float = 60.0

    # Transient blob storage
    uploads_dir: Path = Path("/app/data/uploads")
    blob_api_url: str = "https://blob.vercel-storage.com"
    blob_token: str | None = None

    # Upload limits
    max_upload_mb: int = 10

    rates: RatesConfig = RatesConfig()
    translation: TranslationConfig = TranslationConfig()

    @property
    def normalized_base_url(self) -> str:
        return self.api_base_url.rstrip("/")

    def require_api_key(self) -> str:
        """Return the API key, raising if it was never configured."""
        if not self.api_key:
            logger.error("[Config] API_KEY is not set")
            raise RuntimeError("API key not configured")
        return self.api_key

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"


settings = Settings()
