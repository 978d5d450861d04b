"""
Extraction strategies for remote response shapes.

The OCR API is inconsistent about field names and about where extracted
text lives. Each concern is handled by an ordered list of small strategies;
the first one that yields a value wins. Adding a new shape means adding a
strategy to the relevant list, not another branch.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

PAGE_SEPARATOR = "\n\n"


class ExtractionStrategy(ABC):
    """A single way of pulling a value out of a response payload."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in debug logging."""
        pass

    @abstractmethod
    def extract(self, payload: Any) -> Any | None:
        """
        Try to extract a value from the payload.

        Args:
            payload: Decoded response body.

        Returns:
            The extracted value, or None if this shape does not apply.
        """
        pass


class FieldAlias(ExtractionStrategy):
    """Read a top-level field, treating empty values as absent."""

    def __init__(self, field: str):
        self.field = field

    @property
    def name(self) -> str:
        return f"field:{self.field}"

    def extract(self, payload: Any) -> Any | None:
        if not isinstance(payload, dict):
            return None
        value = payload.get(self.field)
        if value is None or value == "":
            return None
        return value


class PagedText(ExtractionStrategy):
    """Join per-page text from a `pages` array, in array order."""

    def __init__(self, page_fields: Sequence[str] = ("text", "content"), separator: str = PAGE_SEPARATOR):
        self.page_fields = tuple(page_fields)
        self.separator = separator

    @property
    def name(self) -> str:
        return "pages"

    def _page_text(self, page: Any) -> str:
        if isinstance(page, str):
            return page
        if isinstance(page, dict):
            for page_field in self.page_fields:
                value = page.get(page_field)
                if value:
                    return str(value)
        return ""

    def extract(self, payload: Any) -> str | None:
        if not isinstance(payload, dict):
            return None
        pages = payload.get("pages")
        if not isinstance(pages, list) or not pages:
            return None
        text = self.separator.join(self._page_text(page) for page in pages)
        return text or None


class ResponseShapeChain:
    """Ordered chain of extraction strategies, tried in priority order."""

    def __init__(self, strategies: Sequence[ExtractionStrategy]):
        self.strategies = list(strategies)

    def extract(self, payload: Any) -> Any | None:
        """Return the value from the first strategy that matches, or None."""
        for strategy in self.strategies:
            value = strategy.extract(payload)
            if value is not None:
                return value
        return None


def _aliases(*fields: str) -> ResponseShapeChain:
    return ResponseShapeChain([FieldAlias(f) for f in fields])


JOB_ID_SHAPES = _aliases("id", "jobId", "job_id")
STATUS_SHAPES = _aliases("status")
PAGE_COUNT_SHAPES = _aliases("pageCount", "page_count")
ERROR_SHAPES = _aliases("error")

# Inline text on the status response itself
STATUS_TEXT_SHAPES = _aliases("text", "extracted_text")

# Body of the download endpoint: flat fields first, then paginated
DOWNLOAD_TEXT_SHAPES = ResponseShapeChain(
    [
        FieldAlias("text"),
        FieldAlias("extracted_text"),
        FieldAlias("content"),
        PagedText(),
    ]
)


def extract_job_id(payload: Any) -> str | None:
    value = JOB_ID_SHAPES.extract(payload)
    return str(value) if value is not None else None


def extract_page_count(payload: Any) -> int | None:
    """Page count from either alias; non-numeric values count as missing."""
    value = PAGE_COUNT_SHAPES.extract(payload)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def extract_text(payload: Any, chain: ResponseShapeChain = DOWNLOAD_TEXT_SHAPES) -> str | None:
    value = chain.extract(payload)
    return str(value) if value is not None else None
