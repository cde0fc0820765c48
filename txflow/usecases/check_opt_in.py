"""Use case answering whether an account may already hold an asset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from txflow.domain.entities import Address, AssetId
from txflow.domain.errors import LedgerUnavailable
from txflow.domain.holdings import normalize_asset_ids
from txflow.domain.ports import LedgerPort
from txflow.domain.validation import validate_address, validate_asset_id
from txflow.usecases.error_mapping import map_ledger_error

_log = logging.getLogger(__name__)


@dataclass
class CheckOptIn:
    """Read the account's holdings fresh on every call; nothing is cached."""

    ledger_port: LedgerPort

    def __call__(self, address: Address, asset_id: AssetId) -> bool:
        address = validate_address(address)
        asset_id = validate_asset_id(asset_id)
        try:
            snapshot = self.ledger_port.account_snapshot(address)
        except Exception as exc:
            raise map_ledger_error(exc, stage="read") from exc
        held = asset_id in normalize_asset_ids(snapshot)
        _log.debug("Opt-in check %s asset=%s -> %s", address, asset_id, held)
        return held

    def status_or_unknown(self, address: Address, asset_id: AssetId) -> Optional[bool]:
        """UI fallback: ``None`` when the ledger could not be read."""
        try:
            return self(address, asset_id)
        except LedgerUnavailable as exc:
            _log.warning("Opt-in precheck failed: %s", exc.message)
            return None


__all__ = ["CheckOptIn"]
