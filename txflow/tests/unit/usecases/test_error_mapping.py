from __future__ import annotations

import pytest

from txflow.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from txflow.domain.errors import InvalidAmount, LedgerUnavailable, SubmissionRejected
from txflow.usecases.error_mapping import map_ledger_error


def test_use_case_errors_pass_through():
    err = InvalidAmount("bad")

    assert map_ledger_error(err, stage="submit") is err


def test_read_timeout_maps_to_unavailable_with_hint():
    err = map_ledger_error(ApiTimeoutError("Timeout contacting node", context="account"), stage="read")

    assert isinstance(err, LedgerUnavailable)
    assert err.message == "Ledger node timed out. Check connection."


def test_read_server_error_maps_to_unavailable():
    err = map_ledger_error(
        ApiServerError("account: boom (HTTP 503)", status=503, reason="boom", context="account"),
        stage="read",
    )

    assert isinstance(err, LedgerUnavailable)
    assert "boom" in err.message


def test_read_of_arbitrary_exception_keeps_its_text():
    err = map_ledger_error(RuntimeError("Invalid JSON response"), stage="read")

    assert err.kind == "LedgerUnavailable"
    assert err.message == "Invalid JSON response"


def test_submit_client_error_carries_raw_ledger_reason():
    reason = "TransactionPool.Remember: transaction ABC: receiver not opted in to asset 42"
    exc = ApiClientError(f"submit: {reason} (HTTP 400)", status=400, reason=reason, context="submit")

    err = map_ledger_error(exc, stage="submit")

    assert isinstance(err, SubmissionRejected)
    assert err.reason == reason
    assert err.message == reason


@pytest.mark.parametrize("stage", ["submit", "confirm"])
def test_post_submission_timeout_is_a_rejection(stage):
    err = map_ledger_error(ApiTimeoutError("Timeout contacting node"), stage=stage)

    assert isinstance(err, SubmissionRejected)
    assert err.reason == "Timeout contacting node"
    assert "may not have been accepted" in err.message


def test_submit_server_error_keeps_reason():
    err = map_ledger_error(ApiError("weird", status=302, reason="moved"), stage="submit")

    assert isinstance(err, SubmissionRejected)
    assert err.reason == "moved"
    assert err.message == "Ledger node error: moved"


def test_empty_exception_text_uses_default_message():
    err = map_ledger_error(RuntimeError(""), stage="confirm", default_message="confirmation failed")

    assert err.message == "confirmation failed"
