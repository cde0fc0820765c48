from __future__ import annotations

from typing import Optional, Tuple

from txflow.adapters.ledger_mock import LedgerMock
from txflow.adapters.signer_mock import DevSigner
from txflow.domain.validation import encode_address
from txflow.usecases.submit_transactions import SubmitTransactions


def addr(n: int) -> str:
    """Deterministic, checksum-valid address for test account ``n``."""
    return encode_address(bytes([n]) * 32)


SENDER = addr(1)
RECEIVER = addr(2)


def make_pipeline(
    ledger: Optional[LedgerMock] = None,
    signer: Optional[DevSigner] = None,
    **kwargs,
) -> Tuple[LedgerMock, DevSigner, SubmitTransactions]:
    ledger = ledger if ledger is not None else LedgerMock()
    signer = signer if signer is not None else DevSigner()
    return ledger, signer, SubmitTransactions(ledger, signer, **kwargs)
