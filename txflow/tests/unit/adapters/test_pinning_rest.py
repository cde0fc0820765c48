from __future__ import annotations

from typing import Any, Dict, List

import pytest

from txflow.adapters.api_errors import ApiServerError
from txflow.adapters.pinning_rest import PinningRestAdapter


class _ResponseStub:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = ""

    def json(self) -> Any:
        return self._payload


class _SessionStub:
    def __init__(self, response: _ResponseStub) -> None:
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _ResponseStub:
        self.calls.append({"url": url, **kwargs})
        return self.response


def _adapter(response: _ResponseStub):
    adapter = PinningRestAdapter("http://localhost:3001/", upload_timeout_s=30)
    stub = _SessionStub(response)
    adapter.session.session = stub
    return adapter, stub


def test_pin_uploads_multipart_file_and_returns_metadata_url():
    adapter, stub = _adapter(_ResponseStub(payload={"metadataUrl": "https://ipfs.example/ipfs/Qm1"}))

    assert adapter.pin(b"image-bytes", "ticket.png") == "https://ipfs.example/ipfs/Qm1"

    call = stub.calls[0]
    assert call["url"] == "http://localhost:3001/api/pin-image"
    assert call["files"] == {"file": ("ticket.png", b"image-bytes", "application/octet-stream")}
    assert call["timeout"] == 30


def test_pin_accepts_alternate_url_keys():
    adapter, _ = _adapter(_ResponseStub(payload={"url": " https://ipfs.example/ipfs/Qm2 "}))

    assert adapter.pin(b"x", "a.png") == "https://ipfs.example/ipfs/Qm2"


def test_pin_without_url_fails():
    adapter, _ = _adapter(_ResponseStub(payload={"ok": True}))

    with pytest.raises(RuntimeError, match="metadata URL"):
        adapter.pin(b"x", "a.png")


def test_backend_error_is_typed():
    adapter, _ = _adapter(_ResponseStub(500, payload={"error": "pinata down"}))

    with pytest.raises(ApiServerError) as excinfo:
        adapter.pin(b"x", "a.png")
    assert excinfo.value.reason == "pinata down"
