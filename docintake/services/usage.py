from docintake.config import RatesConfig, settings
from docintake.schemas.job import OCRJobStatus


def ocr_cost(status: OCRJobStatus, page_count: int | None, rates: RatesConfig | None = None) -> float:
    """Cost of an OCR job. Only completed jobs are billed; missing page counts bill as one page."""
    if status != OCRJobStatus.COMPLETED:
        return 0.0
    rates = rates or settings.rates
    return max(page_count or 1, 1) * rates.ocr_cost_per_page


def translation_cost(char_count: int, rates: RatesConfig | None = None) -> float:
    """Cost of translating `char_count` source characters."""
    rates = rates or settings.rates
    return (char_count / 1000) * rates.translation_cost_per_1000_chars


def format_cost(cost: float) -> str:
    """Render a cost in USD, keeping sub-cent amounts visible."""
    if 0 < cost < 0.01:
        return f"${cost:.4f}"
    return f"${cost:.2f}"
