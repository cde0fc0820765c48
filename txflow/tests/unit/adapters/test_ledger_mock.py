from __future__ import annotations

import json

import pytest

from txflow.adapters.api_errors import ApiClientError
from txflow.adapters.ledger_mock import LedgerMock, signed_senders
from txflow.adapters.signer_mock import DevSigner, group_id_for, txn_id
from txflow.domain.builders import build_asset_opt_in, build_payment
from txflow.tests.unit.helpers import RECEIVER, SENDER


def _sign(ledger, signer, request, group_id=None):
    return signer.sign(request, params=ledger.suggested_params(), group_id=group_id)


def test_dev_signer_ids_are_deterministic():
    ledger = LedgerMock()
    first = _sign(ledger, DevSigner(), build_payment(SENDER, RECEIVER, 1))
    second = _sign(ledger, DevSigner(), build_payment(SENDER, RECEIVER, 1))

    assert first.tx_id == second.tx_id
    assert first.tx_id == txn_id(json.loads(first.blob)["txn"])
    assert first.sender == SENDER


def test_submit_applies_opt_in_and_records_pending_info():
    ledger = LedgerMock()
    signed = _sign(ledger, DevSigner(), build_asset_opt_in(SENDER, 42))

    tx_id = ledger.submit([signed.blob])

    assert tx_id == signed.tx_id
    assert ledger.pending_info(tx_id)["confirmed-round"] == ledger.last_round
    assert ledger.account_snapshot(SENDER)["assets"] == [{"asset-id": 42, "amount": 0}]
    assert signed_senders(ledger) == [("axfer", SENDER)]


def test_members_must_share_group_id():
    ledger = LedgerMock()
    signer = DevSigner()
    blobs = [
        _sign(ledger, signer, build_payment(SENDER, RECEIVER, 1), group_id="G1").blob,
        _sign(ledger, signer, build_payment(SENDER, RECEIVER, 2), group_id="G2").blob,
    ]

    with pytest.raises(ApiClientError, match="group"):
        ledger.submit(blobs)
    assert ledger.submissions == []


def test_group_signed_with_assigned_id_is_accepted():
    ledger = LedgerMock()
    signer = DevSigner()
    params = ledger.suggested_params()
    members = [build_payment(SENDER, RECEIVER, 1), build_payment(SENDER, RECEIVER, 2)]
    group_id = signer.assign_group(members, params=params)

    ledger.submit([signer.sign(m, params=params, group_id=group_id).blob for m in members])

    assert [txn["group"] for txn in ledger.submissions[0]] == [group_id, group_id]
    assert group_id == group_id_for(signer.signed)


def test_malformed_blob_is_rejected():
    with pytest.raises(ApiClientError) as excinfo:
        LedgerMock().submit([b"\x00garbage"])
    assert excinfo.value.reason == "malformed signed transaction"


def test_unknown_pending_transaction_is_404():
    with pytest.raises(ApiClientError) as excinfo:
        LedgerMock().pending_info("NOPE")
    assert excinfo.value.status == 404
