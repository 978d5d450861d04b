from pydantic import BaseModel, ConfigDict, Field


class TranslateRequest(BaseModel):
    """Request to translate text into English."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    source_language: str | None = Field(default=None, alias="sourceLanguage")


class TranslationResult(BaseModel):
    """Outcome of translating a document."""

    translated_text: str
    source_language: str
    target_language: str = "en"
    chars_processed: int = 0
    chunk_count: int = 0
    cost: float = 0.0


class TranslateResponse(BaseModel):
    """Response for the translate endpoint."""

    success: bool = True
    translated_text: str
    source_language: str
    target_language: str
    chars_processed: int
    cost: float


class DetectLanguageRequest(BaseModel):
    """Request to detect the language of a text sample."""

    text: str = ""


class LanguageDetection(BaseModel):
    """Detected language of a text sample."""

    language: str
    language_name: str
    confidence: float
