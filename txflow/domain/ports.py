from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from .entities import Address, SignedTransaction, SuggestedParams, TransactionRequest, TxId
from .errors import UseCaseError

__all__ = ["LedgerPort", "PinningPort", "SignerPort", "UseCaseError"]


# ---- Ports (Hexagonal boundaries) ----
class LedgerPort(Protocol):
    """Reads and submissions against a ledger node."""

    def account_snapshot(self, address: Address) -> Mapping[str, Any]: ...  # {"assets": [...], ...}
    def suggested_params(self) -> SuggestedParams: ...
    def submit(self, signed: Sequence[bytes]) -> TxId: ...  # one call per group
    def pending_info(self, tx_id: TxId) -> Dict[str, Any]: ...  # {"confirmed-round": int, "pool-error": str}
    def status(self) -> Dict[str, Any]: ...  # {"last-round": int}
    def wait_for_block_after(self, round_: int) -> Dict[str, Any]: ...


class SignerPort(Protocol):
    """Wallet capability that signs on behalf of a sender; keys never leave it."""

    def available(self) -> bool: ...
    def assign_group(self, requests: Sequence[TransactionRequest], *, params: SuggestedParams) -> str: ...  # over complete txns
    def sign(
        self,
        request: TransactionRequest,
        *,
        params: SuggestedParams,
        group_id: Optional[str] = None,
    ) -> SignedTransaction: ...


class PinningPort(Protocol):
    """Content pinning service returning a dereferenceable URL."""

    def pin(self, content: bytes, filename: str) -> str: ...
