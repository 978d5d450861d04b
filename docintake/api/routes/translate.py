from fastapi import APIRouter, Depends, HTTPException, status

from docintake.schemas.translation import (
    DetectLanguageRequest,
    LanguageDetection,
    TranslateRequest,
    TranslateResponse,
)
from docintake.services.translation_service import TranslationService, get_translation_service

router = APIRouter(prefix="/translate", tags=["Translation"])


def translation_service_dependency() -> TranslationService:
    """Get the translation service, failing the request if the API key is missing."""
    try:
        return get_translation_service()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=TranslateResponse)
async def translate_text(
    request: TranslateRequest,
    service: TranslationService = Depends(translation_service_dependency),
):
    """
    Translate document text into English.

    Long text is translated in sentence-aligned chunks. The response
    reports the cost, based on the number of source characters.
    """
    result = await service.translate(request.text, request.source_language)

    return TranslateResponse(
        translated_text=result.translated_text,
        source_language=result.source_language,
        target_language=result.target_language,
        chars_processed=result.chars_processed,
        cost=result.cost,
    )


@router.post("/detect", response_model=LanguageDetection)
async def detect_language(
    request: DetectLanguageRequest,
    service: TranslationService = Depends(translation_service_dependency),
):
    """Detect the language of a text sample."""
    return await service.detect_language(request.text)
