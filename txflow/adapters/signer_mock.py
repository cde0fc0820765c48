from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

from txflow.domain.entities import SignedTransaction, SuggestedParams, TransactionRequest
from txflow.domain.errors import SignerDenied, SignerUnavailable
from txflow.domain.ports import SignerPort
from txflow.domain.validation import sha512_256

_TX_DOMAIN_TAG = b"TX"
_GROUP_DOMAIN_TAG = b"TG"


def canonical_txn(request: TransactionRequest, params: SuggestedParams, group_id: Optional[str]) -> Dict[str, Any]:
    """Unsigned transaction fields as the dev signer and ledger mock exchange them."""
    txn = dict(request.to_payload())
    txn.update(
        fee=max(params.fee, params.min_fee),
        first_valid=params.first_valid,
        last_valid=params.last_valid,
        genesis_id=params.genesis_id,
        genesis_hash=params.genesis_hash,
    )
    if group_id:
        txn["group"] = group_id
    return txn


def txn_bytes(txn: Dict[str, Any]) -> bytes:
    return json.dumps(txn, sort_keys=True, separators=(",", ":")).encode("utf-8")


def txn_id(txn: Dict[str, Any]) -> str:
    digest = sha512_256(_TX_DOMAIN_TAG + txn_bytes(txn))
    return base64.b32encode(digest).decode("ascii").rstrip("=")


def group_id_for(txns: Sequence[Dict[str, Any]]) -> str:
    """Ledger group id of complete transactions: a digest over their ungrouped ids."""
    ids = [txn_id({k: v for k, v in txn.items() if k != "group"}) for txn in txns]
    digest = sha512_256(_GROUP_DOMAIN_TAG + json.dumps(ids, separators=(",", ":")).encode("utf-8"))
    return base64.b64encode(digest).decode("ascii")


@dataclass
class DevSigner(SignerPort):
    """Offline signer double for tests and local development.

    Holds no key material: the "signature" is a digest of the transaction
    bytes, which only ``LedgerMock`` accepts.
    """

    addresses: Iterable[str] = ()
    """Senders this signer will sign for; empty means any sender."""
    online: bool = True
    deny: bool = False
    signed: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._addresses: FrozenSet[str] = frozenset(self.addresses)

    def available(self) -> bool:
        return self.online

    def assign_group(self, requests: Sequence[TransactionRequest], *, params: SuggestedParams) -> str:
        if not self.online:
            raise SignerUnavailable("Wallet is not connected.")
        return group_id_for([canonical_txn(request, params, None) for request in requests])

    def sign(
        self,
        request: TransactionRequest,
        *,
        params: SuggestedParams,
        group_id: Optional[str] = None,
    ) -> SignedTransaction:
        if not self.online:
            raise SignerUnavailable("Wallet is not connected.")
        if self.deny:
            raise SignerDenied("User rejected the signing request.")
        if self._addresses and request.sender not in self._addresses:
            raise SignerDenied(f"Signer does not control {request.sender}.")
        txn = canonical_txn(request, params, group_id)
        raw = txn_bytes(txn)
        blob = json.dumps({"txn": txn, "sig": sha512_256(raw).hex()}, sort_keys=True).encode("utf-8")
        self.signed.append(txn)
        return SignedTransaction(tx_id=txn_id(txn), blob=blob, sender=request.sender)


__all__ = ["DevSigner", "canonical_txn", "group_id_for", "txn_bytes", "txn_id"]
