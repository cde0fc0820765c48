"""Sign, submit, and confirm a transaction group.

The pipeline never retries. A failed group is reported to the caller, who
may build a fresh group and call again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from txflow.domain.entities import (
    MAX_GROUP_SIZE,
    SignedTransaction,
    SubmissionOutcome,
    SubmissionResult,
    SuggestedParams,
    TransactionGroup,
    TransactionRequest,
    TxId,
)
from txflow.domain.errors import (
    SignerDenied,
    SignerUnavailable,
    SubmissionRejected,
    UseCaseError,
)
from txflow.domain.group import as_group
from txflow.domain.ports import LedgerPort, SignerPort
from txflow.usecases.error_mapping import map_ledger_error

DEFAULT_WAIT_ROUNDS = 4
Submittable = Union[TransactionGroup, TransactionRequest, Sequence[TransactionRequest]]


def outcome_from_error(exc: UseCaseError) -> SubmissionOutcome:
    details = {"reason": exc.reason} if isinstance(exc, SubmissionRejected) else {}
    return SubmissionOutcome.failed(exc.code, exc.message, **details)


@dataclass
class SubmitTransactions:
    """Use-case turning a sealed group (or requests to seal) into confirmed transactions."""

    ledger_port: LedgerPort
    signer: Optional[SignerPort]
    wait_rounds: int = DEFAULT_WAIT_ROUNDS
    max_group_size: int = MAX_GROUP_SIZE

    def __post_init__(self) -> None:
        self._log = logging.getLogger(__name__)

    def __call__(self, item: Submittable) -> SubmissionResult:
        group = as_group(item, max_size=self.max_group_size)
        signer = self.require_signer()

        try:
            params = self.ledger_port.suggested_params()
        except Exception as exc:
            raise map_ledger_error(exc, stage="read") from exc

        # Ledger group id covers fee and validity rounds.
        ledger_group = self._assign_group(signer, group, params) if group.is_atomic else None
        signed = [self._sign(signer, member, params, ledger_group) for member in group.members]
        tx_ids = tuple(s.tx_id for s in signed)
        self._log.info(
            "Submitting %d transaction(s)%s: %s",
            len(signed),
            f" as group {group.group_id} (ledger group {ledger_group})" if ledger_group else "",
            ", ".join(tx_ids),
        )

        try:
            self.ledger_port.submit([s.blob for s in signed])
        except Exception as exc:
            err = map_ledger_error(exc, stage="submit")
            self._log.warning("Submission rejected: %s", err.message)
            raise err from exc

        # Members of an atomic group are committed in the same round.
        info = self._await_confirmation(tx_ids[0], params.first_valid)
        return SubmissionResult(
            tx_ids=tx_ids,
            confirmed_round=_as_int(info.get("confirmed-round")),
            asset_id=self._created_asset(group, tx_ids, info),
        )

    def attempt(self, item: Submittable) -> SubmissionOutcome:
        """Run the pipeline and fold use-case failures into an outcome."""
        try:
            return SubmissionOutcome.succeeded(self(item))
        except UseCaseError as exc:
            return outcome_from_error(exc)

    def require_signer(self) -> SignerPort:
        """Return the connected signer or raise ``SignerUnavailable``."""
        signer = self.signer
        if signer is None:
            raise SignerUnavailable("Please connect wallet first.")
        try:
            available = signer.available()
        except Exception as exc:
            raise SignerUnavailable(f"Wallet is not reachable: {exc}") from exc
        if not available:
            raise SignerUnavailable("Please connect wallet first.")
        return signer

    def _assign_group(self, signer: SignerPort, group: TransactionGroup, params: SuggestedParams) -> str:
        try:
            group_id = signer.assign_group(group.members, params=params)
        except UseCaseError:
            raise
        except Exception as exc:
            raise SignerUnavailable(f"Grouping failed: {exc}") from exc
        if not group_id:
            raise SignerUnavailable("Wallet did not assign a group id.")
        return group_id

    def _sign(
        self,
        signer: SignerPort,
        request: TransactionRequest,
        params: SuggestedParams,
        group_id: Optional[str],
    ) -> SignedTransaction:
        try:
            signed = signer.sign(request, params=params, group_id=group_id)
        except UseCaseError:
            raise
        except Exception as exc:
            raise SignerUnavailable(f"Signing failed: {exc}") from exc
        if signed.sender is not None and signed.sender != request.sender:
            raise SignerDenied(f"Signer returned a transaction for {signed.sender}, expected {request.sender}.")
        return signed

    def _await_confirmation(self, tx_id: TxId, first_valid: int) -> Mapping[str, Any]:
        try:
            current = _as_int(self.ledger_port.status().get("last-round")) or first_valid
            for _ in range(max(1, self.wait_rounds)):
                info = self.ledger_port.pending_info(tx_id)
                if (_as_int(info.get("confirmed-round")) or 0) > 0:
                    return info
                pool_error = str(info.get("pool-error") or "").strip()
                if pool_error:
                    raise SubmissionRejected(pool_error)
                self.ledger_port.wait_for_block_after(current)
                current += 1
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_ledger_error(exc, stage="confirm") from exc
        raise SubmissionRejected(f"Transaction {tx_id} not confirmed after {self.wait_rounds} rounds")

    def _created_asset(
        self, group: TransactionGroup, tx_ids: tuple, first_info: Mapping[str, Any]
    ) -> Optional[int]:
        creates: List[TxId] = [tx_id for member, tx_id in zip(group.members, tx_ids) if member.kind == "acfg"]
        if not creates:
            return None
        if creates[0] == tx_ids[0]:
            return _as_int(first_info.get("asset-index"))
        try:
            info = self.ledger_port.pending_info(creates[0])
        except Exception as exc:
            # The transaction is confirmed; only the index lookup failed.
            self._log.warning("Could not read created asset index for %s: %s", creates[0], exc)
            return None
        return _as_int(info.get("asset-index"))


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = ["DEFAULT_WAIT_ROUNDS", "SubmitTransactions", "outcome_from_error"]
