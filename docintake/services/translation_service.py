import logging
from typing import Any

import httpx

from docintake.config import RatesConfig, TranslationConfig, settings
from docintake.exceptions import InvalidInputError, ProtocolError, RemoteError
from docintake.schemas.translation import LanguageDetection, TranslationResult
from docintake.services.usage import format_cost, translation_cost
from docintake.translation import LANGUAGE_NAMES, language_name, normalize_language, split_text

logger = logging.getLogger(__name__)


def _translated_text(payload: Any) -> str | None:
    """Pull data.translations[0].translatedText out of a response body."""
    try:
        value = payload["data"]["translations"][0]["translatedText"]
    except (KeyError, IndexError, TypeError):
        return None
    return value if isinstance(value, str) and value else None


def _first_detection(payload: Any) -> dict | None:
    """Pull data.detections[0][0] out of a response body."""
    try:
        detection = payload["data"]["detections"][0][0]
    except (KeyError, IndexError, TypeError):
        return None
    return detection if isinstance(detection, dict) else None


class TranslationService:
    """
    Translates documents into English through the remote translation API.

    Long text is split into chunks that are translated strictly one after
    another: the output must keep chunk order and the API gives no ordering
    guarantee across parallel calls. Do not parallelize without adding an
    explicit reassembly step and rate-limit accounting.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        config: TranslationConfig | None = None,
        rates: RatesConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the translation service.

        Args:
            api_key: Bearer token for the remote API.
            base_url: Remote API base. Defaults to settings.
            config: Chunking and timeout settings. Defaults to settings.
            rates: Pricing. Defaults to settings.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.config = config or settings.translation
        self.rates = rates or settings.rates
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport)

    async def translate(self, text: str, source_language: str | None) -> TranslationResult:
        """
        Translate text into the target language (English).

        Args:
            text: Text to translate.
            source_language: Language code of the text.

        Returns:
            The translation with its cost, computed on the original length.

        Raises:
            InvalidInputError: If the text is empty or no source language is given.
            RemoteError: If any chunk request fails. No partial output is returned.
            ProtocolError: If a response lacks the translated text.
        """
        if not text or not isinstance(text, str):
            raise InvalidInputError("No text provided")
        if not source_language or not isinstance(source_language, str) or not source_language.strip():
            raise InvalidInputError("No source language provided")

        target = self.config.target_language
        source = normalize_language(source_language)

        if source == target:
            logger.info(f"[Translate] Source is already {target}, returning text unchanged")
            return TranslationResult(
                translated_text=text,
                source_language=source_language,
                target_language=target,
            )

        chunks = split_text(text, self.config.chunk_size)
        logger.info(
            f"[Translate] Translating {len(text)} chars from {source_language} ({source}) "
            f"to {target} in {len(chunks)} chunk(s)"
        )

        translated_chunks: list[str] = []
        async with self._client() as client:
            for index, chunk in enumerate(chunks, start=1):
                logger.debug(f"[Translate] Chunk {index}/{len(chunks)} ({len(chunk)} chars)")
                translated_chunks.append(
                    await self._translate_chunk(client, chunk, source, source_language, index, len(chunks))
                )

        cost = translation_cost(len(text), self.rates)
        translated_text = "".join(translated_chunks)
        logger.info(f"[Translate] Complete: {len(translated_text)} chars, cost {format_cost(cost)}")

        return TranslationResult(
            translated_text=translated_text,
            source_language=source_language,
            target_language=target,
            chars_processed=len(text),
            chunk_count=len(chunks),
            cost=cost,
        )

    async def _translate_chunk(
        self,
        client: httpx.AsyncClient,
        chunk: str,
        source: str,
        source_language: str,
        index: int,
        total: int,
    ) -> str:
        url = f"{self.base_url}/translate/v1/translate"
        name = language_name(source_language)
        body = {"q": chunk, "source": source, "target": self.config.target_language, "format": "text"}

        try:
            response = await client.post(url, json=body, headers=self._headers())
        except httpx.RequestError as e:
            logger.error(f"[Translate] Chunk {index}/{total} request failed: {e}")
            raise RemoteError(f"Translation from {name} failed: {e}", url=url) from e

        if not response.is_success:
            logger.error(
                f"[Translate] Chunk {index}/{total} API error: {response.status_code} - {response.text[:500]}"
            )
            raise RemoteError(
                f"Translation from {name} failed (HTTP {response.status_code})",
                status_code=response.status_code,
                body=response.text,
                url=url,
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None
        translated = _translated_text(payload)
        if translated is None:
            logger.error(f"[Translate] Chunk {index}/{total} response missing content: {response.text[:500]}")
            raise ProtocolError("Translation response missing content")
        return translated

    async def detect_language(self, text: str) -> LanguageDetection:
        """
        Detect the language of a text sample.

        Detection is advisory: if the remote call fails or returns nothing
        usable, English with low confidence is reported instead of an error.

        Raises:
            InvalidInputError: If the text is empty.
        """
        if not text or not isinstance(text, str):
            raise InvalidInputError("No text provided")

        fallback = LanguageDetection(language="en", language_name="English", confidence=0.5)
        url = f"{self.base_url}/translate/v1/detect"

        try:
            async with self._client() as client:
                response = await client.post(
                    url, json={"q": text[: self.config.detect_sample_chars]}, headers=self._headers()
                )
        except httpx.RequestError as e:
            logger.error(f"[Detect] Language detection request failed: {e}")
            return fallback

        if not response.is_success:
            logger.error(f"[Detect] Language detection API error: {response.status_code}")
            return fallback

        try:
            detection = _first_detection(response.json())
        except ValueError:
            detection = None
        if detection is None:
            return fallback

        code = str(detection.get("language") or "en")
        return LanguageDetection(
            language=code,
            language_name=LANGUAGE_NAMES.get(code, code.upper()),
            confidence=detection.get("confidence") or 0.8,
        )


def get_translation_service() -> TranslationService:
    """Create a translation service from settings."""
    return TranslationService(api_key=settings.require_api_key())
