"""REST adapter implementing the ledger port against an algod v2 node."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import requests

from txflow.adapters.api_errors import raise_for_status
from txflow.adapters.http_client import HttpConfig, RetryingSession
from txflow.domain.entities import Address, SuggestedParams, TxId
from txflow.domain.ports import LedgerPort

ALGOD_TOKEN_HEADER = "X-Algo-API-Token"
DEFAULT_VALIDITY_WINDOW = 1000


class AlgodRestAdapter(LedgerPort):
    """HTTP adapter for `/v2/accounts`, `/v2/transactions*` and `/v2/status*`."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
        validity_window: int = DEFAULT_VALIDITY_WINDOW,
    ) -> None:
        if not base_url:
            raise ValueError("AlgodRestAdapter requires a node URL")
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(self.cfg, auth_header=ALGOD_TOKEN_HEADER, auth_token=token or None)
        self.validity_window = validity_window
        self._log = logging.getLogger(__name__)

    # ---------- LedgerPort ----------

    def account_snapshot(self, address: Address) -> Dict[str, Any]:
        """Fetch `/v2/accounts/{address}`; the raw payload is normalized by the caller."""
        url = self._make_url(f"/v2/accounts/{address}")
        resp = self.session.get(url)
        raise_for_status(resp, "account")
        return self._json_dict(resp)

    def suggested_params(self) -> SuggestedParams:
        url = self._make_url("/v2/transactions/params")
        resp = self.session.get(url)
        raise_for_status(resp, "params")
        payload = self._json_dict(resp)
        try:
            last_round = int(payload["last-round"])
            min_fee = int(payload.get("min-fee", 1000))
            return SuggestedParams(
                fee=int(payload.get("fee", 0)),
                min_fee=min_fee,
                first_valid=last_round,
                last_valid=last_round + self.validity_window,
                genesis_id=str(payload.get("genesis-id") or ""),
                genesis_hash=str(payload.get("genesis-hash") or ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError(f"Invalid params payload: {exc}") from exc

    def submit(self, signed: Sequence[bytes]) -> TxId:
        """POST all signed transactions in one body so a group stays atomic in transit."""
        if not signed:
            raise ValueError("submit requires at least one signed transaction")
        body = b"".join(bytes(blob) for blob in signed)
        url = self._make_url("/v2/transactions")
        self._log.debug("Submitting %d signed transaction(s), %d bytes", len(signed), len(body))
        resp = self.session.post_bytes(url, body=body)
        raise_for_status(resp, "submit")
        tx_id = str(self._json_dict(resp).get("txId") or "").strip()
        if not tx_id:
            raise RuntimeError("Invalid submit payload: txId missing")
        return tx_id

    def pending_info(self, tx_id: TxId) -> Dict[str, Any]:
        url = self._make_url(f"/v2/transactions/pending/{tx_id}")
        resp = self.session.get(url)
        raise_for_status(resp, "pending")
        return self._json_dict(resp)

    def status(self) -> Dict[str, Any]:
        resp = self.session.get(self._make_url("/v2/status"))
        raise_for_status(resp, "status")
        return self._json_dict(resp)

    def wait_for_block_after(self, round_: int) -> Dict[str, Any]:
        url = self._make_url(f"/v2/status/wait-for-block-after/{int(round_)}")
        resp = self.session.get(url)
        raise_for_status(resp, "wait_for_block")
        return self._json_dict(resp)

    # ------------------------------------------------------------------
    def _make_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _json_dict(resp: requests.Response) -> Dict[str, Any]:
        """Parse response JSON and require object payload."""
        try:
            payload = resp.json()
        except Exception:
            snippet = getattr(resp, "text", "")[:400]
            raise RuntimeError(f"Invalid JSON response: {snippet}")
        if not isinstance(payload, dict):
            raise RuntimeError("Invalid JSON response shape: expected object")
        return dict(payload)


__all__ = ["ALGOD_TOKEN_HEADER", "AlgodRestAdapter"]
