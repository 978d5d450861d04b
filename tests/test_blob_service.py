from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import urlparse

import httpx
import pytest

from docintake.exceptions import InvalidInputError, ProtocolError, RemoteError
from docintake.services.blob_service import HttpBlobStore, LocalBlobStore


@pytest.mark.asyncio
async def test_local_put_and_delete(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path)

    blob = await store.put("ocr/1-scan.png", b"data", "image/png")
    path = Path(urlparse(blob.ref).path)

    assert blob.ref.startswith("file://")
    assert blob.public_url is None
    assert path.read_bytes() == b"data"

    await store.delete(blob.ref)
    assert not path.exists()

    # Already gone
    await store.delete(blob.ref)


@pytest.mark.asyncio
async def test_local_rejects_refs_outside_root(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path / "uploads")
    outside = tmp_path / "keep.txt"
    outside.write_text("keep")

    with pytest.raises(InvalidInputError):
        await store.delete(outside.as_uri())
    with pytest.raises(InvalidInputError):
        await store.delete("https://blob.test/ocr/1-scan.png")

    assert outside.exists()


@pytest.mark.asyncio
async def test_local_rejects_pathname_traversal(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path / "uploads")

    with pytest.raises(InvalidInputError):
        await store.put("../escape.png", b"data", "image/png")


def make_http_store(handler) -> HttpBlobStore:
    return HttpBlobStore(token="blob-token", api_url="https://blob.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_http_put_returns_public_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"url": "https://public.blob.test/ocr/1-scan.png"})

    blob = await make_http_store(handler).put("ocr/1-scan.png", b"data", "image/png")

    assert blob.ref == blob.public_url == "https://public.blob.test/ocr/1-scan.png"
    request = seen[0]
    assert request.method == "PUT"
    assert str(request.url) == "https://blob.test/ocr/1-scan.png"
    assert request.headers["authorization"] == "Bearer blob-token"
    assert request.headers["x-content-type"] == "image/png"


@pytest.mark.asyncio
async def test_http_put_failure() -> None:
    store = make_http_store(lambda request: httpx.Response(403, text="forbidden"))

    with pytest.raises(RemoteError) as exc_info:
        await store.put("ocr/1-scan.png", b"data", "image/png")
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_http_delete_sends_ref() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://blob.test/delete"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={})

    await make_http_store(handler).delete("https://public.blob.test/ocr/1-scan.png")

    assert bodies == [{"urls": ["https://public.blob.test/ocr/1-scan.png"]}]


@pytest.mark.asyncio
async def test_http_delete_missing_blob_is_ok() -> None:
    await make_http_store(lambda request: httpx.Response(404)).delete("https://public.blob.test/gone.png")


@pytest.mark.asyncio
async def test_http_delete_failure() -> None:
    store = make_http_store(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(RemoteError) as exc_info:
        await store.delete("https://public.blob.test/ocr/1-scan.png")
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>ok</html>"),
        httpx.Response(200, json=["https://public.blob.test/ocr/1-scan.png"]),
        httpx.Response(200, json={"pathname": "ocr/1-scan.png"}),
    ],
)
async def test_http_put_unusable_response_is_protocol_error(response: httpx.Response) -> None:
    store = make_http_store(lambda request: response)

    with pytest.raises(ProtocolError):
        await store.put("ocr/1-scan.png", b"data", "image/png")
