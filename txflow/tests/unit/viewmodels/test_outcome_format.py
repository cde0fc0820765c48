from __future__ import annotations

from txflow.domain.entities import SubmissionOutcome, SubmissionResult
from txflow.viewmodels.outcome_format import format_outcome, kind_label

LORA = "https://lora.algokit.io/testnet"


def test_success_links_first_transaction():
    outcome = SubmissionOutcome.succeeded(SubmissionResult(tx_ids=("TXA", "TXB")))

    report = format_outcome(outcome, explorer_base_url=LORA + "/")

    assert report.ok
    assert report.reference == "TXA"
    assert report.link == f"{LORA}/transaction/TXA"
    assert report.asset_link is None
    assert report.message == "Atomic group of 2 transactions confirmed"


def test_success_links_created_asset():
    outcome = SubmissionOutcome.succeeded(SubmissionResult(tx_ids=("TXA",), asset_id=1234))

    report = format_outcome(outcome, explorer_base_url=LORA, success_message="NFT minted!")

    assert report.message == "NFT minted!"
    assert report.asset_link == f"{LORA}/asset/1234"
    assert report.lines() == [
        "NFT minted!",
        "Transaction: TXA",
        f"View: {LORA}/transaction/TXA",
        f"Asset: {LORA}/asset/1234",
    ]


def test_success_without_explorer_has_no_links():
    report = format_outcome(SubmissionOutcome.succeeded(SubmissionResult(tx_ids=("TXA",))))

    assert report.reference == "TXA"
    assert report.link is None
    assert report.message == "Transaction confirmed"


def test_failure_reports_kind_and_message():
    outcome = SubmissionOutcome.failed("SubmissionRejected", "receiver not opted in")

    report = format_outcome(outcome, explorer_base_url=LORA)

    assert not report.ok
    assert report.kind == "SubmissionRejected"
    assert report.message == "Transaction rejected: receiver not opted in"
    assert report.reference is None
    assert report.link is None


def test_failure_headline_override():
    outcome = SubmissionOutcome.failed("PinningFailed", "timeout")

    report = format_outcome(outcome, failure_message="Error uploading to backend")

    assert report.message == "Error uploading to backend: timeout"


def test_kind_label_handles_unknown_kinds():
    assert kind_label("MissingOptIn") == "Receiver not opted in"
    assert kind_label("SomethingNew") == "Something new"
    assert kind_label(None) == "Failed"
