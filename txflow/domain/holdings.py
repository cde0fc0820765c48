from __future__ import annotations

"""Normalize loosely-shaped account snapshots into canonical asset ids.

Ledger APIs expose the same holding under different key names depending on
the client and API version (``asset-id`` from the REST API, ``assetId`` from
typed SDK models, a nested ``asset.id`` from indexer-style records). All
call sites go through :func:`normalize_asset_ids` instead of probing keys
themselves.
"""

from typing import Any, FrozenSet, Iterable, Mapping, Optional, Sequence

from .entities import AssetId

_ID_KEYS = ("asset-id", "assetId", "asset_id")
_NESTED_KEYS = ("id", "index")


def _coerce_asset_id(value: Any) -> Optional[AssetId]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        token = value.strip()
        if token.isascii() and token.isdigit():
            return int(token)
    return None


def holding_asset_id(record: Any) -> Optional[AssetId]:
    """Return the canonical asset id of one holding record, if any."""

    if not isinstance(record, Mapping):
        return None
    candidates = [record.get(key) for key in _ID_KEYS]
    nested = record.get("asset")
    if isinstance(nested, Mapping):
        candidates.extend(nested.get(key) for key in _NESTED_KEYS)
    for value in candidates:
        asset_id = _coerce_asset_id(value)
        if asset_id is not None:
            return asset_id
    return None


def _holding_records(snapshot: Any) -> Iterable[Any]:
    if isinstance(snapshot, Mapping):
        assets = snapshot.get("assets")
        if assets is None and isinstance(snapshot.get("account"), Mapping):
            assets = snapshot["account"].get("assets")
        if assets is None:
            # A bare holding record passed on its own.
            return [snapshot] if holding_asset_id(snapshot) is not None else []
        snapshot = assets
    if isinstance(snapshot, Sequence) and not isinstance(snapshot, (str, bytes)):
        return snapshot
    return []


def normalize_asset_ids(snapshot: Any) -> FrozenSet[AssetId]:
    """Collect every asset id held in ``snapshot`` as ints."""

    ids = set()
    for record in _holding_records(snapshot):
        asset_id = holding_asset_id(record)
        if asset_id is not None:
            ids.add(asset_id)
    return frozenset(ids)


def holds_asset(snapshot: Any, asset_id: AssetId) -> bool:
    return asset_id in normalize_asset_ids(snapshot)


__all__ = ["holding_asset_id", "holds_asset", "normalize_asset_ids"]
