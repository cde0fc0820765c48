"""Atomic native payment plus asset transfer to a single receiver.

Both transfers land together or not at all. The receiver's opt-in is read
fresh before anything is signed; a receiver that cannot hold the asset
fails the flow with ``MissingOptIn`` and no network submission happens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from txflow.domain.builders import build_asset_transfer, build_payment
from txflow.domain.entities import NATIVE, USDC_TESTNET, Address, AssetRef, SubmissionOutcome
from txflow.domain.errors import InvalidAssetId, MissingOptIn, UseCaseError
from txflow.domain.group import AtomicGroupBuilder
from txflow.domain.validation import to_base_units
from txflow.usecases.check_opt_in import CheckOptIn
from txflow.usecases.submit_transactions import SubmitTransactions, outcome_from_error

_log = logging.getLogger(__name__)


@dataclass
class SendAtomicTransfer:
    check_opt_in: CheckOptIn
    submit: SubmitTransactions
    asset: AssetRef = USDC_TESTNET

    def __call__(
        self,
        sender: Address,
        receiver: Address,
        *,
        native_amount: Union[str, int] = 1,
        asset_amount: Union[str, int] = 1,
    ) -> SubmissionOutcome:
        try:
            group = self._build(sender, receiver, native_amount, asset_amount)
        except UseCaseError as exc:
            return outcome_from_error(exc)

        _log.info(
            "Submitting atomic transfer %s: %s ALGO + %s %s to %s",
            group.group_id,
            native_amount,
            asset_amount,
            self.asset.unit_name,
            receiver,
        )
        return self.submit.attempt(group)

    def _build(self, sender, receiver, native_amount, asset_amount):
        if self.asset.is_native:
            raise InvalidAssetId("Atomic transfer needs an asset other than the native currency.")
        payment = build_payment(sender, receiver, to_base_units(native_amount, NATIVE.decimals))
        transfer = build_asset_transfer(
            sender,
            receiver,
            self.asset.asset_id,
            to_base_units(asset_amount, self.asset.decimals),
        )
        if not self.check_opt_in(transfer.receiver, transfer.asset_id):
            raise MissingOptIn(
                f"Receiver is not opted in to {self.asset.unit_name} "
                f"(asset {transfer.asset_id}); opt in before sending."
            )
        return AtomicGroupBuilder().add_member(payment).add_member(transfer).seal()


__all__ = ["SendAtomicTransfer"]
