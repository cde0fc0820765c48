from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from txflow.domain.builders import build_asset_transfer, build_payment
from txflow.domain.entities import NATIVE, Address, AssetRef, SubmissionOutcome
from txflow.domain.errors import UseCaseError
from txflow.domain.validation import format_base_units, to_base_units
from txflow.usecases.submit_transactions import SubmitTransactions, outcome_from_error

_log = logging.getLogger(__name__)


@dataclass
class SendPayment:
    """Send a human amount of the native currency or of one asset."""

    submit: SubmitTransactions

    def __call__(
        self,
        sender: Address,
        receiver: Address,
        amount: Union[str, int],
        asset: Optional[AssetRef] = None,
    ) -> SubmissionOutcome:
        ref = asset or NATIVE
        try:
            base_units = to_base_units(amount, ref.decimals)
            if ref.is_native:
                request = build_payment(sender, receiver, base_units)
            else:
                request = build_asset_transfer(sender, receiver, ref.asset_id, base_units)
        except UseCaseError as exc:
            return outcome_from_error(exc)

        _log.info(
            "Sending %s %s from %s to %s",
            format_base_units(base_units, ref.decimals),
            ref.unit_name,
            request.sender,
            request.receiver,
        )
        return self.submit.attempt(request)


__all__ = ["SendPayment"]
