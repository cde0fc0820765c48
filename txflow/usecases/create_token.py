from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from txflow.domain.builders import build_token_create
from txflow.domain.entities import Address, SubmissionOutcome
from txflow.domain.errors import UseCaseError
from txflow.usecases.submit_transactions import SubmitTransactions, outcome_from_error

_log = logging.getLogger(__name__)


@dataclass
class CreateToken:
    """Mint a fungible asset whose supply is entered in whole human units."""

    submit: SubmitTransactions

    def __call__(
        self,
        sender: Address,
        *,
        name: str,
        unit_name: str,
        total: Union[str, int],
        decimals: int,
    ) -> SubmissionOutcome:
        try:
            request = build_token_create(
                sender,
                name=name,
                unit_name=unit_name,
                human_total=total,
                decimals=decimals,
            )
        except UseCaseError as exc:
            return outcome_from_error(exc)

        _log.info(
            "Creating token %r (%s) total=%s decimals=%s",
            request.params.name,
            request.params.unit_name,
            request.params.total,
            request.params.decimals,
        )
        outcome = self.submit.attempt(request)
        if outcome.ok:
            _log.info("Token %r created as asset %s", request.params.name, outcome.asset_id)
        return outcome


__all__ = ["CreateToken"]
