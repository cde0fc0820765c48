from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from txflow.adapters.api_errors import ApiClientError, ApiTimeoutError
from txflow.adapters.signer_mock import group_id_for, txn_id
from txflow.domain.entities import Address, SuggestedParams, TxId
from txflow.domain.holdings import holds_asset
from txflow.domain.ports import LedgerPort

FIRST_ASSET_INDEX = 1000


@dataclass
class LedgerMock(LedgerPort):
    """Offline substitute for ``AlgodRestAdapter`` with ledger-like semantics.

    Understands blobs produced by ``DevSigner``. A submission is validated as
    a whole and applied only if every member passes, so atomic groups behave
    like they do on the real ledger.
    """

    accounts: Dict[Address, List[Dict[str, Any]]] = field(default_factory=dict)
    """Raw holding records per address, in whatever key shape a test needs."""
    reject_reason: Optional[str] = None
    """When set, every submission is rejected with this raw reason."""
    reads_fail: bool = False
    auto_confirm: bool = True
    last_round: int = 100

    def __post_init__(self) -> None:
        self.calls: Counter = Counter()
        self.submissions: List[List[Dict[str, Any]]] = []
        self._pending: Dict[TxId, Dict[str, Any]] = {}
        self._next_asset = FIRST_ASSET_INDEX

    # ---------- LedgerPort ----------

    def account_snapshot(self, address: Address) -> Dict[str, Any]:
        self.calls["account_snapshot"] += 1
        self._maybe_fail_read("account")
        return {"address": address, "assets": [dict(r) for r in self.accounts.get(address, [])]}

    def suggested_params(self) -> SuggestedParams:
        self.calls["suggested_params"] += 1
        self._maybe_fail_read("params")
        return SuggestedParams(
            fee=0,
            min_fee=1000,
            first_valid=self.last_round,
            last_valid=self.last_round + 1000,
            genesis_id="mocknet-v1",
            genesis_hash="bW9ja25ldA==",
        )

    def submit(self, signed: Sequence[bytes]) -> TxId:
        self.calls["submit"] += 1
        txns = [self._decode(blob) for blob in signed]
        if self.reject_reason:
            raise self._rejection(self.reject_reason)
        self._check_group(txns)
        for txn in txns:
            self._check_txn(txn)

        self.last_round += 1
        self.submissions.append(txns)
        for txn in txns:
            info: Dict[str, Any] = {"confirmed-round": self.last_round if self.auto_confirm else 0, "pool-error": ""}
            info.update(self._apply(txn))
            self._pending[txn_id(txn)] = info
        return txn_id(txns[0])

    def pending_info(self, tx_id: TxId) -> Dict[str, Any]:
        self.calls["pending_info"] += 1
        self._maybe_fail_read("pending")
        try:
            return dict(self._pending[tx_id])
        except KeyError:
            raise ApiClientError(
                "pending: transaction not found (HTTP 404)",
                status=404,
                reason="transaction not found",
                context="pending",
            )

    def status(self) -> Dict[str, Any]:
        self.calls["status"] += 1
        self._maybe_fail_read("status")
        return {"last-round": self.last_round}

    def wait_for_block_after(self, round_: int) -> Dict[str, Any]:
        self.calls["wait_for_block_after"] += 1
        self.last_round = max(self.last_round, int(round_)) + 1
        return {"last-round": self.last_round}

    # ---------- Test helpers ----------

    def opt_in(self, address: Address, asset_id: int, **extra: Any) -> None:
        self.accounts.setdefault(address, []).append({"asset-id": asset_id, "amount": 0, **extra})

    @property
    def network_calls(self) -> int:
        return sum(self.calls.values())

    # ------------------------------------------------------------------
    def _maybe_fail_read(self, ctx: str) -> None:
        if self.reads_fail:
            raise ApiTimeoutError("Timeout contacting mock ledger", context=ctx)

    @staticmethod
    def _rejection(reason: str) -> ApiClientError:
        return ApiClientError(f"submit: {reason} (HTTP 400)", status=400, reason=reason, context="submit")

    def _decode(self, blob: bytes) -> Dict[str, Any]:
        try:
            txn = json.loads(bytes(blob).decode("utf-8"))["txn"]
        except (ValueError, KeyError, TypeError):
            raise self._rejection("malformed signed transaction")
        if not isinstance(txn, dict):
            raise self._rejection("malformed signed transaction")
        return txn

    def _check_group(self, txns: List[Dict[str, Any]]) -> None:
        groups = {txn.get("group") for txn in txns}
        if len(txns) > 1 and (len(groups) != 1 or None in groups):
            raise self._rejection("transaction group is malformed: members disagree on group id")
        if len(txns) > 1 and groups != {group_id_for(txns)}:
            raise self._rejection("incomplete group: group id does not match its transactions")

    def _holds(self, address: Address, asset_id: int) -> bool:
        return holds_asset({"assets": self.accounts.get(address, [])}, asset_id)

    def _check_txn(self, txn: Dict[str, Any]) -> None:
        if txn.get("type") != "axfer":
            return
        receiver, asset_id = txn["receiver"], int(txn["asset_id"])
        is_opt_in = receiver == txn["sender"] and int(txn["amount"]) == 0
        if not is_opt_in and not self._holds(receiver, asset_id):
            raise self._rejection(f"receiver {receiver} not opted in to asset {asset_id}")

    def _apply(self, txn: Dict[str, Any]) -> Dict[str, Any]:
        kind = txn.get("type")
        if kind == "axfer" and txn["receiver"] == txn["sender"] and not self._holds(txn["sender"], int(txn["asset_id"])):
            self.opt_in(txn["sender"], int(txn["asset_id"]))
        if kind == "acfg":
            asset_index = self._next_asset
            self._next_asset += 1
            self.opt_in(txn["sender"], asset_index, amount=txn["params"]["total"])
            return {"asset-index": asset_index}
        return {}


def signed_senders(ledger: LedgerMock) -> List[Tuple[str, str]]:
    """Flatten recorded submissions into (type, sender) pairs for assertions."""
    return [(txn["type"], txn["sender"]) for batch in ledger.submissions for txn in batch]


__all__ = ["LedgerMock", "signed_senders"]
