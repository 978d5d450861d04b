"""
Sentence-aware text chunking for size-limited translation requests.

Chunks are contiguous slices of the input: joining them in order, with no
separator, gives back the original text exactly.

Only ". ", "? " and "! " count as sentence boundaries. Text that ends
sentences without a following space, or uses non-Latin delimiters, falls
back to a hard split at the size limit.
"""

from typing import Iterator

from docintake.exceptions import InvalidInputError

SENTENCE_TERMINATORS = (". ", "? ", "! ")


def _find_split(text: str, start: int, max_chunk_size: int) -> int:
    """
    Find where the chunk starting at `start` should end.

    Looks for the rightmost sentence terminator inside the trailing half of
    the window and splits just after its space. Falls back to the full
    window.
    """
    end = start + max_chunk_size
    boundary = max(text.rfind(terminator, start, end) for terminator in SENTENCE_TERMINATORS)
    if boundary != -1 and (boundary - start) * 2 > max_chunk_size:
        return boundary + 2
    return end


def iter_chunks(text: str, max_chunk_size: int) -> Iterator[str]:
    """
    Lazily yield chunks of `text`, each at most `max_chunk_size` characters.

    The generator is a pure function of its arguments, so calling it again
    restarts from the beginning.

    Args:
        text: Text to split.
        max_chunk_size: Maximum characters per chunk.

    Raises:
        InvalidInputError: If max_chunk_size is less than 1.
    """
    if max_chunk_size < 1:
        raise InvalidInputError(f"max_chunk_size must be at least 1, got {max_chunk_size}")

    if len(text) <= max_chunk_size:
        yield text
        return

    position = 0
    while position < len(text):
        if len(text) - position <= max_chunk_size:
            yield text[position:]
            return
        split_at = _find_split(text, position, max_chunk_size)
        yield text[position:split_at]
        position = split_at


def split_text(text: str, max_chunk_size: int) -> list[str]:
    """Split `text` into an ordered list of chunks. See iter_chunks."""
    return list(iter_chunks(text, max_chunk_size))
