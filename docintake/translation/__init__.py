"""
Text translation helpers.

Splits long text into request-sized chunks and maps language codes to the
forms the remote translation API expects.
"""

from .chunker import SENTENCE_TERMINATORS, iter_chunks, split_text
from .languages import CANONICAL_CODES, LANGUAGE_NAMES, language_name, normalize_language

__all__ = [
    "SENTENCE_TERMINATORS",
    "iter_chunks",
    "split_text",
    "CANONICAL_CODES",
    "LANGUAGE_NAMES",
    "language_name",
    "normalize_language",
]
