from __future__ import annotations

import pytest

from docintake.services.response_shapes import (
    DOWNLOAD_TEXT_SHAPES,
    FieldAlias,
    PagedText,
    ResponseShapeChain,
    extract_job_id,
    extract_page_count,
    extract_text,
)


@pytest.mark.parametrize(
    "payload",
    [{"id": "j1"}, {"jobId": "j1"}, {"job_id": "j1"}, {"id": "", "job_id": "j1"}],
)
def test_job_id_aliases(payload: dict) -> None:
    assert extract_job_id(payload) == "j1"


def test_job_id_alias_priority() -> None:
    assert extract_job_id({"job_id": "c", "jobId": "b", "id": "a"}) == "a"


def test_job_id_missing() -> None:
    assert extract_job_id({"status": "queued"}) is None
    assert extract_job_id(["not", "a", "dict"]) is None


def test_page_count_aliases() -> None:
    assert extract_page_count({"pageCount": 3}) == 3
    assert extract_page_count({"page_count": "2"}) == 2
    assert extract_page_count({"page_count": "many"}) is None
    assert extract_page_count({}) is None


def test_flat_text_fields_in_priority_order() -> None:
    assert extract_text({"content": "c", "extracted_text": "e"}) == "e"
    assert extract_text({"text": "t", "content": "c"}) == "t"
    assert extract_text({"content": "c"}) == "c"


def test_pages_are_joined_with_blank_line() -> None:
    assert extract_text({"pages": [{"text": "A"}, {"text": "B"}]}) == "A\n\nB"


def test_pages_fall_back_to_content_per_page() -> None:
    payload = {"pages": [{"content": "A"}, {"text": "B"}, {}]}
    assert extract_text(payload) == "A\n\nB\n\n"


def test_flat_text_beats_pages() -> None:
    assert extract_text({"text": "flat", "pages": [{"text": "A"}]}) == "flat"


def test_no_text_shape_matches() -> None:
    assert extract_text({"pages": []}) is None
    assert extract_text({"status": "completed"}) is None


def test_custom_chain_order() -> None:
    chain = ResponseShapeChain([PagedText(separator="|"), FieldAlias("text")])
    payload = {"text": "flat", "pages": [{"text": "A"}, {"text": "B"}]}
    assert chain.extract(payload) == "A|B"
    assert DOWNLOAD_TEXT_SHAPES.extract(payload) == "flat"
