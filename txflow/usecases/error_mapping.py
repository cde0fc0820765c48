"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Literal, Optional

from txflow.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from txflow.domain.errors import LedgerUnavailable, SubmissionRejected, UseCaseError

Stage = Literal["read", "submit", "confirm"]


def map_ledger_error(
    exc: Exception,
    *,
    stage: Stage,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to the failure taxonomy for one pipeline stage.

    Reads (account snapshots, params) surface as ``LedgerUnavailable``. Once a
    submission was attempted, every failure is a ``SubmissionRejected`` that
    carries the ledger's raw reason for display.

    Args:
        exc: Exception raised by a ledger adapter.
        stage: Pipeline stage the exception was raised in.
        default_message: Fallback text when the exception carries none.

    Returns:
        UseCaseError: Error to raise to the caller.
    """
    if isinstance(exc, UseCaseError):
        return exc

    reason = _reason(exc) or default_message or "Unexpected ledger error."
    if stage == "read":
        if isinstance(exc, ApiTimeoutError):
            return LedgerUnavailable("Ledger node timed out. Check connection.")
        if isinstance(exc, ApiServerError):
            return LedgerUnavailable(f"Ledger node error, try again: {reason}")
        return LedgerUnavailable(reason)

    if isinstance(exc, ApiTimeoutError):
        return SubmissionRejected(reason, "Ledger node timed out; the transaction may not have been accepted.")
    if isinstance(exc, ApiClientError):
        return SubmissionRejected(reason)
    if isinstance(exc, ApiError):
        return SubmissionRejected(reason, f"Ledger node error: {reason}")
    return SubmissionRejected(reason)


def _reason(exc: Exception) -> Optional[str]:
    if isinstance(exc, ApiError) and exc.reason:
        return exc.reason.strip() or None
    text = str(exc).strip()
    return text or None


__all__ = ["map_ledger_error"]
