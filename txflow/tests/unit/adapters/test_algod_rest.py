from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest
from requests import exceptions as req_exc

from txflow.adapters.algod_rest import ALGOD_TOKEN_HEADER, AlgodRestAdapter
from txflow.adapters.api_errors import ApiClientError, ApiServerError, ApiTimeoutError
from txflow.tests.unit.helpers import SENDER


class _ResponseStub:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class _SessionStub:
    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any):
        self.calls.append(("GET", url, kwargs))
        return self._next()

    def post(self, url: str, **kwargs: Any):
        self.calls.append(("POST", url, kwargs))
        return self._next()

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _adapter(*responses: Any, **kwargs: Any) -> Tuple[AlgodRestAdapter, _SessionStub]:
    adapter = AlgodRestAdapter("http://node:4001/", token="secret", **kwargs)
    stub = _SessionStub(*responses)
    adapter.session.session = stub
    return adapter, stub


def test_account_snapshot_sends_token_header():
    adapter, stub = _adapter(_ResponseStub(payload={"address": SENDER, "assets": [{"asset-id": 1}]}))

    snapshot = adapter.account_snapshot(SENDER)

    assert snapshot["assets"] == [{"asset-id": 1}]
    method, url, kwargs = stub.calls[0]
    assert (method, url) == ("GET", f"http://node:4001/v2/accounts/{SENDER}")
    assert kwargs["headers"][ALGOD_TOKEN_HEADER] == "secret"
    assert kwargs["timeout"] == 10


def test_suggested_params_maps_node_fields():
    adapter, _ = _adapter(
        _ResponseStub(
            payload={
                "last-round": 500,
                "min-fee": 1000,
                "fee": 0,
                "genesis-id": "testnet-v1.0",
                "genesis-hash": "SGO1GKSzyE7IEPItTxCByw9x8FmnrCDexi9/cOUJOiI=",
            }
        ),
        validity_window=100,
    )

    params = adapter.suggested_params()

    assert (params.first_valid, params.last_valid) == (500, 600)
    assert (params.fee, params.min_fee) == (0, 1000)
    assert params.genesis_id == "testnet-v1.0"


def test_suggested_params_rejects_incomplete_payload():
    adapter, _ = _adapter(_ResponseStub(payload={"min-fee": 1000}))

    with pytest.raises(RuntimeError):
        adapter.suggested_params()


def test_submit_posts_concatenated_blobs_once():
    adapter, stub = _adapter(_ResponseStub(payload={"txId": "TX1"}))

    assert adapter.submit([b"first", b"second"]) == "TX1"

    method, url, kwargs = stub.calls[0]
    assert (method, url) == ("POST", "http://node:4001/v2/transactions")
    assert kwargs["data"] == b"firstsecond"
    assert kwargs["headers"]["Content-Type"] == "application/x-binary"


def test_submit_rejection_keeps_node_message():
    adapter, _ = _adapter(_ResponseStub(400, payload={"message": "overspend"}))

    with pytest.raises(ApiClientError) as excinfo:
        adapter.submit([b"blob"])

    assert excinfo.value.status == 400
    assert excinfo.value.reason == "overspend"
    assert "HTTP 400" in str(excinfo.value)


def test_submit_is_not_retried_on_timeout():
    adapter, stub = _adapter(req_exc.ConnectionError("reset"), _ResponseStub(payload={"txId": "TX1"}))

    with pytest.raises(ApiTimeoutError):
        adapter.submit([b"blob"])
    assert len(stub.calls) == 1


def test_reads_retry_transport_failures():
    adapter, stub = _adapter(req_exc.Timeout(), _ResponseStub(payload={"last-round": 9}))

    assert adapter.status() == {"last-round": 9}
    assert len(stub.calls) == 2


def test_reads_give_up_after_configured_retries():
    adapter, stub = _adapter(req_exc.Timeout(), req_exc.Timeout(), req_exc.Timeout(), retries=2)

    with pytest.raises(ApiTimeoutError):
        adapter.status()
    assert len(stub.calls) == 3


def test_pending_info_and_wait_urls():
    adapter, stub = _adapter(
        _ResponseStub(payload={"confirmed-round": 12, "asset-index": 77}),
        _ResponseStub(payload={"last-round": 13}),
    )

    assert adapter.pending_info("TX1")["asset-index"] == 77
    assert adapter.wait_for_block_after(12) == {"last-round": 13}
    assert [call[1] for call in stub.calls] == [
        "http://node:4001/v2/transactions/pending/TX1",
        "http://node:4001/v2/status/wait-for-block-after/12",
    ]


def test_server_error_and_bad_json():
    adapter, _ = _adapter(_ResponseStub(503, payload={"message": "catching up"}), _ResponseStub(text="<html>"))

    with pytest.raises(ApiServerError):
        adapter.status()
    with pytest.raises(RuntimeError):
        adapter.status()


def test_adapter_requires_url():
    with pytest.raises(ValueError):
        AlgodRestAdapter("")
