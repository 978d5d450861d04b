from __future__ import annotations

import pytest

from docintake.exceptions import InvalidInputError
from docintake.translation import iter_chunks, split_text

PARAGRAPHS = (
    "El deudor declara sus ingresos mensuales. ¿Tiene otros ingresos? No! "
    "La vivienda es alquilada.\n\nEl contrato vence en marzo. "
    "Gastos: comida, transporte, servicios.\nFin del documento"
)


def test_short_text_is_single_chunk() -> None:
    assert split_text("Hola mundo.", 100) == ["Hola mundo."]


def test_text_exactly_at_limit_is_single_chunk() -> None:
    text = "a" * 20
    assert split_text(text, 20) == [text]


def test_empty_text_is_single_empty_chunk() -> None:
    assert split_text("", 5) == [""]


def test_splits_after_sentence_terminator_in_trailing_half() -> None:
    text = "a" * 12 + ". " + "b" * 26
    assert split_text(text, 20) == ["a" * 12 + ". ", "b" * 20, "b" * 6]


def test_rightmost_terminator_wins() -> None:
    text = "a" * 11 + "? " + "bb! " + "c" * 20
    chunks = split_text(text, 20)
    assert chunks == ["a" * 11 + "? bb! ", "c" * 20]


def test_terminator_in_leading_half_is_ignored() -> None:
    text = "ab. " + "c" * 30
    chunks = split_text(text, 20)
    assert chunks[0] == text[:20]


def test_terminator_exactly_at_half_is_ignored() -> None:
    text = "a" * 10 + ". " + "b" * 20
    assert split_text(text, 20)[0] == text[:20]


def test_punctuation_without_space_falls_back_to_hard_split() -> None:
    text = ("Sentence." * 10)[:45]
    chunks = split_text(text, 20)
    assert [len(c) for c in chunks] == [20, 20, 5]


@pytest.mark.parametrize("size", range(1, 60))
def test_round_trip_and_size_bound(size: int) -> None:
    chunks = split_text(PARAGRAPHS, size)
    assert "".join(chunks) == PARAGRAPHS
    assert all(len(chunk) <= size for chunk in chunks)
    assert all(chunk for chunk in chunks)


def test_paragraph_breaks_survive_chunking() -> None:
    chunks = split_text(PARAGRAPHS, 50)
    assert "\n\n" in "".join(chunks)


def test_iter_chunks_is_lazy_and_restartable() -> None:
    text = "First sentence here. " * 10
    gen = iter_chunks(text, 50)
    first = next(gen)
    assert len(first) <= 50
    assert list(iter_chunks(text, 50)) == list(iter_chunks(text, 50))
    assert [first, *gen] == split_text(text, 50)


def test_reference_chunk_budget() -> None:
    text = "This is one sentence of a long declaration. " * 300
    chunks = split_text(text, 4000)
    assert len(chunks) > 1
    assert all(len(c) <= 4000 for c in chunks)
    assert all(c.endswith(". ") for c in chunks[:-1])
    assert "".join(chunks) == text


@pytest.mark.parametrize("size", [0, -5])
def test_invalid_chunk_size(size: int) -> None:
    with pytest.raises(InvalidInputError):
        split_text("text", size)
