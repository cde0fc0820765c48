"""Opt an account in to an asset unless it already holds it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from txflow.domain.builders import build_asset_opt_in
from txflow.domain.entities import Address, AssetId, SubmissionOutcome
from txflow.domain.errors import UseCaseError
from txflow.usecases.check_opt_in import CheckOptIn
from txflow.usecases.submit_transactions import SubmitTransactions, outcome_from_error

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptInResult:
    already_opted_in: bool
    outcome: Optional[SubmissionOutcome] = None
    """Submission outcome; ``None`` when nothing was submitted."""

    @property
    def ok(self) -> bool:
        return self.already_opted_in or (self.outcome is not None and self.outcome.ok)


@dataclass
class OptInAsset:
    check_opt_in: CheckOptIn
    submit: SubmitTransactions

    def __call__(self, address: Address, asset_id: AssetId) -> OptInResult:
        try:
            if self.check_opt_in(address, asset_id):
                _log.info("%s already opted in to asset %s", address, asset_id)
                return OptInResult(already_opted_in=True)
            request = build_asset_opt_in(address, asset_id)
        except UseCaseError as exc:
            return OptInResult(already_opted_in=False, outcome=outcome_from_error(exc))

        _log.info("Opting %s in to asset %s", request.sender, request.asset_id)
        return OptInResult(already_opted_in=False, outcome=self.submit.attempt(request))


__all__ = ["OptInAsset", "OptInResult"]
