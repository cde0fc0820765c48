"""Outcome formatting helpers for the calling UI.

Call context:
    The CLI and any front end call ``format_outcome`` once per finished
    action to turn a ``SubmissionOutcome`` into display text and explorer
    links. Nothing here performs I/O or keeps state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from txflow.domain.entities import SubmissionOutcome

_KIND_LABELS = {
    "InvalidAddress": "Invalid address",
    "InvalidAmount": "Invalid amount",
    "InvalidAssetId": "Invalid asset id",
    "InvalidAssetParams": "Invalid asset settings",
    "EmptyGroup": "Empty group",
    "GroupTooLarge": "Group too large",
    "GroupSealed": "Group already sealed",
    "MissingOptIn": "Receiver not opted in",
    "LedgerUnavailable": "Ledger unavailable",
    "SignerUnavailable": "Wallet unavailable",
    "SignerDenied": "Signing rejected",
    "SubmissionRejected": "Transaction rejected",
    "PinningFailed": "Upload failed",
}


@dataclass(frozen=True)
class OutcomeReport:
    status: str
    message: str
    kind: Optional[str] = None
    reference: Optional[str] = None
    """First transaction id of a successful submission."""
    link: Optional[str] = None
    asset_link: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def lines(self) -> list[str]:
        """Render the report as terminal lines."""
        out = [self.message]
        if self.reference:
            out.append(f"Transaction: {self.reference}")
        if self.link:
            out.append(f"View: {self.link}")
        if self.asset_link:
            out.append(f"Asset: {self.asset_link}")
        return out


def kind_label(kind: Optional[str]) -> str:
    """Convert a failure kind into a short operator-facing label."""
    key = (kind or "").strip()
    if not key:
        return "Failed"
    if key in _KIND_LABELS:
        return _KIND_LABELS[key]
    # CamelCase kinds from adapters not listed above.
    spaced = "".join(f" {ch.lower()}" if ch.isupper() and i else ch for i, ch in enumerate(key))
    return spaced[:1].upper() + spaced[1:]


def explorer_link(base_url: str, section: str, ref: object) -> str:
    return f"{base_url.rstrip('/')}/{section}/{ref}"


def format_outcome(
    outcome: SubmissionOutcome,
    *,
    explorer_base_url: Optional[str] = None,
    success_message: Optional[str] = None,
    failure_message: Optional[str] = None,
) -> OutcomeReport:
    """Build the display report for one finished action.

    Args:
        outcome: Result of a use case.
        explorer_base_url: Explorer root; links are omitted when falsy.
        success_message: Headline for a successful outcome.
        failure_message: Headline prefix for a failed outcome.

    Returns:
        OutcomeReport: Message plus reference id and explorer links.
    """
    if not outcome.ok:
        detail = outcome.message or kind_label(outcome.kind)
        headline = failure_message or kind_label(outcome.kind)
        message = detail if headline == detail else f"{headline}: {detail}"
        return OutcomeReport(status="failure", kind=outcome.kind, message=message)

    reference = outcome.tx_ids[0] if outcome.tx_ids else None
    link = asset_link = None
    if explorer_base_url and reference:
        link = explorer_link(explorer_base_url, "transaction", reference)
    if explorer_base_url and outcome.asset_id is not None:
        asset_link = explorer_link(explorer_base_url, "asset", outcome.asset_id)

    message = success_message or _default_success(outcome)
    return OutcomeReport(
        status="success",
        message=message,
        reference=reference,
        link=link,
        asset_link=asset_link,
    )


def _default_success(outcome: SubmissionOutcome) -> str:
    if outcome.asset_id is not None:
        return f"Asset created with ID {outcome.asset_id}"
    if len(outcome.tx_ids) > 1:
        return f"Atomic group of {len(outcome.tx_ids)} transactions confirmed"
    return "Transaction confirmed"


__all__ = [
    "OutcomeReport",
    "explorer_link",
    "format_outcome",
    "kind_label",
]
